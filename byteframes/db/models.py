from pydantic import BaseModel


class Config(BaseModel):
    """A named scene grouping widgets."""

    id: str
    name: str
    is_active: int = 0
    created_at: int
    updated_at: int


class Widget(BaseModel):
    """A reusable JS/CSS overlay element definition."""

    id: str
    name: str
    js_code: str = ""
    css_code: str = ""
    created_at: int
    updated_at: int


class WidgetWithConfig(Widget):
    """A widget as placed in one config, with its mount state."""

    enabled: int = 1
    z_index: int = 0
    position_x: int = 0
    position_y: int = 0
    is_mounted: int = 0


class WidgetRuntime(BaseModel):
    """Ephemeral mount state of a widget; zeroed when no row exists."""

    widget_id: str = ""
    is_mounted: int = 0
    mounted_at: int = 0


class Setting(BaseModel):
    """A flat key/value application preference."""

    key: str
    value: str
    updated_at: int
