"""Database access layer (DAL) for byteframes.

This sub-package owns every SQL statement so the host-facing surface only
deals with models and JSON.
"""
