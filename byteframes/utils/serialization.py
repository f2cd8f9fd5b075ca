"""JSON payloads handed back to the host shell."""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from pydantic import BaseModel

__all__ = ["to_json", "list_to_json", "success", "error", "EMPTY", "SUCCESS"]

EMPTY = "{}"
SUCCESS = json.dumps({"success": True})


def to_json(model: Optional[BaseModel]) -> str:
    """Serialize a model; ``None`` becomes an empty object."""
    if model is None:
        return EMPTY
    return model.model_dump_json()


def list_to_json(models: Iterable[BaseModel]) -> str:
    """Serialize models as a JSON array (``[]`` when there are none)."""
    return json.dumps([m.model_dump(mode="json") for m in models])


def success() -> str:
    return SUCCESS


def error(exc: Any) -> str:
    """Wrap an exception (or message) as ``{"error": "<message>"}``."""
    return json.dumps({"error": str(exc)})
