"""byteframes: data layer for the desktop widget overlay."""

__version__ = "0.1.0"
