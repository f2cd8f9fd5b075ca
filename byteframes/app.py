"""Function-call surface bound by the host desktop shell.

Every public coroutine takes primitive arguments and returns a JSON string:
the requested data, ``{"success": true}``, or ``{"error": "<message>"}``.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Optional

from .core.bootstrap import ensure_default_config
from .db import connection
from .db.models import WidgetRuntime
from .db.repositories import (
    ConfigRepository,
    ConfigWidgetRepository,
    SettingRepository,
    WidgetRepository,
    WidgetRuntimeRepository,
)
from .middlewares.logging_middleware import LoggingMiddleware
from .utils.serialization import error, list_to_json, success, to_json
from .utils.validators import to_flag

logger = logging.getLogger(__name__)


def host_call(func: Callable[..., Awaitable[str]]) -> Callable[..., Awaitable[str]]:
    """Run a host-facing operation through the middleware; errors become error JSON."""

    @functools.wraps(func)
    async def wrapper(self: "App", *args: Any, **kwargs: Any) -> str:
        try:
            return await self._middleware(
                functools.partial(func, self), func.__name__, *args, **kwargs
            )
        except Exception as e:
            return error(e)

    return wrapper


class App:
    """Backend object exposed to the UI shell."""

    def __init__(self) -> None:
        self._middleware = LoggingMiddleware()

    async def startup(self) -> None:
        """Open and initialize the database, then seed the default scene.

        Open/init failures propagate to the caller.
        """
        await connection.open_database()
        seeded = await ensure_default_config()
        logger.info("Backend started (default scene seeded: %s)", seeded)

    async def shutdown(self) -> None:
        await connection.close_connection()

    def greet(self, name: str) -> str:
        return f"Hello {name}, It's show time!"

    # ===== Configs =====

    @host_call
    async def get_configs(self) -> str:
        return list_to_json(await ConfigRepository.list_all())

    @host_call
    async def get_config(self, config_id: str) -> str:
        return to_json(await ConfigRepository.get(config_id))

    @host_call
    async def get_active_config(self) -> str:
        return to_json(await ConfigRepository.get_active())

    @host_call
    async def create_config(self, name: str) -> str:
        return to_json(await ConfigRepository.add(name))

    @host_call
    async def set_config_active(self, config_id: str, active: Any) -> str:
        await ConfigRepository.set_active(config_id, to_flag(active))
        return success()

    @host_call
    async def rename_config(self, config_id: str, name: str) -> str:
        await ConfigRepository.rename(config_id, name)
        return success()

    @host_call
    async def delete_config(self, config_id: str) -> str:
        await ConfigRepository.delete(config_id)
        return success()

    # ===== Widgets =====

    @host_call
    async def get_widgets(self) -> str:
        return list_to_json(await WidgetRepository.list_all())

    @host_call
    async def get_widget(self, widget_id: str) -> str:
        return to_json(await WidgetRepository.get(widget_id))

    @host_call
    async def get_config_widgets(self, config_id: str) -> str:
        return list_to_json(await WidgetRepository.list_for_config(config_id))

    @host_call
    async def create_widget(self, name: str, js_code: str, css_code: str) -> str:
        return to_json(await WidgetRepository.add(name, js_code, css_code))

    @host_call
    async def update_widget(self, widget_id: str, name: str, js_code: str, css_code: str) -> str:
        await WidgetRepository.update(widget_id, name, js_code, css_code)
        return success()

    @host_call
    async def delete_widget(self, widget_id: str) -> str:
        await WidgetRepository.delete(widget_id)
        return success()

    # ===== Config <-> Widget links =====

    @host_call
    async def add_widget_to_config(
        self, config_id: str, widget_id: str, enabled: Any, z_index: int
    ) -> str:
        await ConfigWidgetRepository.add(config_id, widget_id, to_flag(enabled), z_index)
        return success()

    @host_call
    async def remove_widget_from_config(self, config_id: str, widget_id: str) -> str:
        await ConfigWidgetRepository.remove(config_id, widget_id)
        return success()

    @host_call
    async def update_config_widget(
        self,
        config_id: str,
        widget_id: str,
        enabled: Any,
        z_index: int,
        position_x: Optional[int] = None,
        position_y: Optional[int] = None,
    ) -> str:
        await ConfigWidgetRepository.update(
            config_id,
            widget_id,
            to_flag(enabled),
            z_index,
            position_x=position_x,
            position_y=position_y,
        )
        return success()

    # ===== Widget runtime =====

    @host_call
    async def get_widget_runtime(self, widget_id: str) -> str:
        runtime = await WidgetRuntimeRepository.get(widget_id)
        return to_json(runtime or WidgetRuntime())

    @host_call
    async def set_widget_mounted(self, widget_id: str, is_mounted: Any, mounted_at: int) -> str:
        await WidgetRuntimeRepository.set_mounted(widget_id, to_flag(is_mounted), mounted_at)
        return success()

    # ===== Settings =====

    @host_call
    async def get_setting(self, key: str) -> str:
        return to_json(await SettingRepository.get(key))

    @host_call
    async def set_setting(self, key: str, value: str) -> str:
        await SettingRepository.set(key, value)
        return success()

    @host_call
    async def get_all_settings(self) -> str:
        return list_to_json(await SettingRepository.list_all())

    @host_call
    async def delete_setting(self, key: str) -> str:
        await SettingRepository.delete(key)
        return success()
