"""SQLite repository implementations using aiosqlite."""

from __future__ import annotations

import logging
from typing import List, Optional

from . import connection
from .models import (
    Config as ConfigModel,
    Setting as SettingModel,
    Widget as WidgetModel,
    WidgetRuntime as WidgetRuntimeModel,
    WidgetWithConfig as WidgetWithConfigModel,
)
from ..utils.ids import CONFIG_PREFIX, WIDGET_PREFIX, new_id, now

logger = logging.getLogger(__name__)


class ConfigRepository:
    """SQLite implementation of config (scene) repository."""

    @classmethod
    async def list_all(cls) -> List[ConfigModel]:
        """List all configs, newest first."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT id, name, is_active, created_at, updated_at
                    FROM configs
                    ORDER BY created_at DESC, id DESC
                    """
                )
                rows = await cursor.fetchall()
                return [ConfigModel(**dict(row)) for row in rows]
        except Exception as e:
            logger.exception("Failed to list configs: %s", e)
            raise

    @classmethod
    async def get(cls, config_id: str) -> Optional[ConfigModel]:
        """Get a config by its ID."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM configs WHERE id = ?", (config_id,))
                row = await cursor.fetchone()
                return ConfigModel(**dict(row)) if row else None
        except Exception as e:
            logger.exception("Failed to get config %s: %s", config_id, e)
            raise

    @classmethod
    async def get_active(cls) -> Optional[ConfigModel]:
        """Return the active config, if any."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM configs WHERE is_active = 1 ORDER BY updated_at DESC LIMIT 1"
                )
                row = await cursor.fetchone()
                return ConfigModel(**dict(row)) if row else None
        except Exception as e:
            logger.exception("Failed to get active config: %s", e)
            raise

    @classmethod
    async def add(cls, name: str) -> ConfigModel:
        """Create a new, inactive config."""
        ts = now()
        config = ConfigModel(
            id=new_id(CONFIG_PREFIX),
            name=name,
            is_active=0,
            created_at=ts,
            updated_at=ts,
        )
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO configs (id, name, is_active, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (config.id, config.name, config.is_active, config.created_at, config.updated_at),
                )
                await conn.commit()
                return config
        except Exception as e:
            logger.exception("Failed to add config %s: %s", name, e)
            raise

    @classmethod
    async def set_active(cls, config_id: str, active: int) -> None:
        """
        Set the active flag of a config.
        Activating a config first deactivates every other one.
        """
        try:
            async with connection.get_connection() as conn:
                if active == 1:
                    await conn.execute("UPDATE configs SET is_active = 0")
                await conn.execute(
                    "UPDATE configs SET is_active = ?, updated_at = ? WHERE id = ?",
                    (active, now(), config_id),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to set config %s active=%s: %s", config_id, active, e)
            raise

    @classmethod
    async def rename(cls, config_id: str, name: str) -> None:
        """Rename a config."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    "UPDATE configs SET name = ?, updated_at = ? WHERE id = ?",
                    (name, now(), config_id),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to rename config %s: %s", config_id, e)
            raise

    @classmethod
    async def delete(cls, config_id: str) -> None:
        """Delete a config; its widget placements go with it."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute("DELETE FROM configs WHERE id = ?", (config_id,))
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to delete config %s: %s", config_id, e)
            raise


class WidgetRepository:
    """SQLite implementation of widget repository."""

    @classmethod
    async def list_all(cls) -> List[WidgetModel]:
        """List all widgets, newest first."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT id, name, js_code, css_code, created_at, updated_at
                    FROM widgets
                    ORDER BY created_at DESC, id DESC
                    """
                )
                rows = await cursor.fetchall()
                return [WidgetModel(**dict(row)) for row in rows]
        except Exception as e:
            logger.exception("Failed to list widgets: %s", e)
            raise

    @classmethod
    async def get(cls, widget_id: str) -> Optional[WidgetModel]:
        """Get a widget by its ID."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM widgets WHERE id = ?", (widget_id,))
                row = await cursor.fetchone()
                return WidgetModel(**dict(row)) if row else None
        except Exception as e:
            logger.exception("Failed to get widget %s: %s", widget_id, e)
            raise

    @classmethod
    async def list_for_config(cls, config_id: str) -> List[WidgetWithConfigModel]:
        """List the widgets placed in a config, lowest z-index first."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT
                        w.id, w.name, w.js_code, w.css_code, w.created_at, w.updated_at,
                        cw.enabled, cw.z_index, cw.position_x, cw.position_y,
                        COALESCE(wr.is_mounted, 0) AS is_mounted
                    FROM widgets w
                    INNER JOIN config_widgets cw ON w.id = cw.widget_id
                    LEFT JOIN widget_runtime wr ON w.id = wr.widget_id
                    WHERE cw.config_id = ?
                    ORDER BY cw.z_index ASC, w.created_at ASC
                    """,
                    (config_id,),
                )
                rows = await cursor.fetchall()
                return [WidgetWithConfigModel(**dict(row)) for row in rows]
        except Exception as e:
            logger.exception("Failed to list widgets for config %s: %s", config_id, e)
            raise

    @classmethod
    async def add(cls, name: str, js_code: str, css_code: str) -> WidgetModel:
        """Create a widget together with its (unmounted) runtime row."""
        ts = now()
        widget = WidgetModel(
            id=new_id(WIDGET_PREFIX),
            name=name,
            js_code=js_code,
            css_code=css_code,
            created_at=ts,
            updated_at=ts,
        )
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO widgets (id, name, js_code, css_code, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (widget.id, widget.name, widget.js_code, widget.css_code, ts, ts),
                )
                await conn.execute(
                    "INSERT OR IGNORE INTO widget_runtime (widget_id, is_mounted) VALUES (?, 0)",
                    (widget.id,),
                )
                await conn.commit()
                return widget
        except Exception as e:
            logger.exception("Failed to add widget %s: %s", name, e)
            raise

    @classmethod
    async def update(cls, widget_id: str, name: str, js_code: str, css_code: str) -> None:
        """Replace a widget's name and code."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE widgets
                    SET name = ?, js_code = ?, css_code = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (name, js_code, css_code, now(), widget_id),
                )
                await conn.commit()
                if cursor.rowcount == 0:
                    logger.debug("Update matched no widget %s", widget_id)
        except Exception as e:
            logger.exception("Failed to update widget %s: %s", widget_id, e)
            raise

    @classmethod
    async def delete(cls, widget_id: str) -> None:
        """Delete a widget; placements and runtime state cascade."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute("DELETE FROM widgets WHERE id = ?", (widget_id,))
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to delete widget %s: %s", widget_id, e)
            raise


class ConfigWidgetRepository:
    """SQLite implementation of config <-> widget link repository."""

    @classmethod
    async def add(cls, config_id: str, widget_id: str, enabled: int, z_index: int) -> None:
        """Place a widget in a config, replacing any existing placement."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    """
                    INSERT OR REPLACE INTO config_widgets (config_id, widget_id, enabled, z_index)
                    VALUES (?, ?, ?, ?)
                    """,
                    (config_id, widget_id, enabled, z_index),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to add widget %s to config %s: %s", widget_id, config_id, e)
            raise

    @classmethod
    async def remove(cls, config_id: str, widget_id: str) -> None:
        """Remove a widget from a config."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    "DELETE FROM config_widgets WHERE config_id = ? AND widget_id = ?",
                    (config_id, widget_id),
                )
                await conn.commit()
        except Exception as e:
            logger.exception(
                "Failed to remove widget %s from config %s: %s", widget_id, config_id, e
            )
            raise

    @classmethod
    async def update(
        cls,
        config_id: str,
        widget_id: str,
        enabled: int,
        z_index: int,
        position_x: Optional[int] = None,
        position_y: Optional[int] = None,
    ) -> None:
        """Update a placement. Coordinates are only written when given."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    """
                    UPDATE config_widgets
                    SET enabled    = ?,
                        z_index    = ?,
                        position_x = COALESCE(?, position_x),
                        position_y = COALESCE(?, position_y)
                    WHERE config_id = ? AND widget_id = ?
                    """,
                    (enabled, z_index, position_x, position_y, config_id, widget_id),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to update link %s/%s: %s", config_id, widget_id, e)
            raise


class WidgetRuntimeRepository:
    """SQLite implementation of widget runtime repository."""

    @classmethod
    async def get(cls, widget_id: str) -> Optional[WidgetRuntimeModel]:
        """Get the runtime row of a widget."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT widget_id, is_mounted, mounted_at FROM widget_runtime WHERE widget_id = ?",
                    (widget_id,),
                )
                row = await cursor.fetchone()
                return WidgetRuntimeModel(**dict(row)) if row else None
        except Exception as e:
            logger.exception("Failed to get runtime for widget %s: %s", widget_id, e)
            raise

    @classmethod
    async def set_mounted(cls, widget_id: str, is_mounted: int, mounted_at: int) -> None:
        """Upsert the runtime row of a widget."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    """
                    INSERT OR REPLACE INTO widget_runtime (widget_id, is_mounted, mounted_at)
                    VALUES (?, ?, ?)
                    """,
                    (widget_id, is_mounted, mounted_at),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to set runtime for widget %s: %s", widget_id, e)
            raise


class SettingRepository:
    """SQLite implementation of the key/value settings store."""

    @classmethod
    async def get(cls, key: str) -> Optional[SettingModel]:
        """Get a setting by key."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT key, value, updated_at FROM settings WHERE key = ?",
                    (key,),
                )
                row = await cursor.fetchone()
                return SettingModel(**dict(row)) if row else None
        except Exception as e:
            logger.exception("Failed to get setting %s: %s", key, e)
            raise

    @classmethod
    async def set(cls, key: str, value: str) -> None:
        """Insert or overwrite a setting."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute(
                    "INSERT OR REPLACE INTO settings (key, value, updated_at) VALUES (?, ?, ?)",
                    (key, value, now()),
                )
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to set setting %s: %s", key, e)
            raise

    @classmethod
    async def list_all(cls) -> List[SettingModel]:
        """List all settings ordered by key."""
        try:
            async with connection.get_connection() as conn:
                cursor = await conn.execute("SELECT key, value, updated_at FROM settings ORDER BY key")
                rows = await cursor.fetchall()
                return [SettingModel(**dict(row)) for row in rows]
        except Exception as e:
            logger.exception("Failed to list settings: %s", e)
            raise

    @classmethod
    async def delete(cls, key: str) -> None:
        """Delete a setting."""
        try:
            async with connection.get_connection() as conn:
                await conn.execute("DELETE FROM settings WHERE key = ?", (key,))
                await conn.commit()
        except Exception as e:
            logger.exception("Failed to delete setting %s: %s", key, e)
            raise
