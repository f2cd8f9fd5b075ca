"""Seed a default scene into an empty database."""

from __future__ import annotations

import logging

from ..db import connection
from ..utils.ids import CONFIG_PREFIX, WIDGET_PREFIX, new_id, now

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "Default Scene"
DEFAULT_WIDGET_NAME = "Clock Widget"

DEFAULT_WIDGET_JS = """export default function Widget(ctx) {
  let raf = 0
  return {
    mount(el) {
      const span = document.createElement('div')
      span.className = 'widget-element'
      el.appendChild(span)
      const tick = () => {
        const now = new Date()
        span.textContent = now.toLocaleTimeString()
        raf = requestAnimationFrame(tick)
      }
      tick()
    },
    unmount() {
      cancelAnimationFrame(raf)
    }
  }
}"""

DEFAULT_WIDGET_CSS = """.widget-element {
  position: absolute;
  top: 16px;
  right: 16px;
  padding: 8px 12px;
  border-radius: 10px;
  background: rgba(0,0,0,0.55);
  color: #e5ecff;
  font-family: "SFMono-Regular", Consolas, monospace;
  font-size: 16px;
  pointer-events: none;
}"""


async def ensure_default_config() -> bool:
    """
    Create an active "Default Scene" holding a clock widget when no config exists.

    Returns True when the scene was seeded. Failures are logged and rolled
    back; they never propagate.
    """
    async with connection.get_connection() as conn:
        try:
            cursor = await conn.execute("SELECT COUNT(*) FROM configs")
            row = await cursor.fetchone()
        except Exception as e:
            logger.error("Error checking configs: %s", e)
            return False
        if row and row[0] > 0:
            return False

        ts = now()
        config_id = new_id(CONFIG_PREFIX)
        widget_id = new_id(WIDGET_PREFIX)

        try:
            await conn.execute("BEGIN")
            await conn.execute(
                """
                INSERT INTO configs (id, name, is_active, created_at, updated_at)
                VALUES (?, ?, 1, ?, ?)
                """,
                (config_id, DEFAULT_CONFIG_NAME, ts, ts),
            )
            await conn.execute(
                """
                INSERT INTO widgets (id, name, js_code, css_code, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (widget_id, DEFAULT_WIDGET_NAME, DEFAULT_WIDGET_JS, DEFAULT_WIDGET_CSS, ts, ts),
            )
            await conn.execute(
                """
                INSERT INTO config_widgets (config_id, widget_id, enabled, z_index)
                VALUES (?, ?, 1, 0)
                """,
                (config_id, widget_id),
            )
            await conn.execute(
                "INSERT INTO widget_runtime (widget_id, is_mounted) VALUES (?, 0)",
                (widget_id,),
            )
            await conn.commit()
        except Exception as e:
            logger.exception("Error seeding default config: %s", e)
            await conn.rollback()
            return False

    logger.info("Created default config %s and clock widget %s", config_id, widget_id)
    return True
