"""Utility functions for streamhost."""

from __future__ import annotations

import json
import re
import time
import uuid
from pathlib import Path
from typing import Any

# Fixed namespace so the same seed string always maps to the same id.
_ID_NAMESPACE = uuid.UUID("6ba7b811-9dad-11d1-80b4-00c04fd430c8")

_JSON_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_TEMPLATE_KEY = re.compile(r"\{\{(\w+)\}\}")
_DECODER = json.JSONDecoder()


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def now_ms() -> int:
    return int(time.time() * 1000)


def string_to_uuid(value: str) -> str:
    """Derive a stable UUID string from an arbitrary seed string."""
    return str(uuid.uuid5(_ID_NAMESPACE, value))


def render_template(template: str, **values: Any) -> str:
    """Fill ``{{key}}`` placeholders; unknown keys render as empty strings."""

    def _sub(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    return _TEMPLATE_KEY.sub(_sub, template)


def parse_json_object(text: str) -> dict[str, Any] | None:
    """Extract the first JSON object from model output.

    Accepts fenced ```json blocks as well as bare objects embedded in prose.
    Returns None when nothing parseable is found.
    """
    if not text:
        return None

    candidates = [m.group(1).strip() for m in _JSON_FENCE.finditer(text)]
    candidates.append(text.strip())

    for candidate in candidates:
        try:
            obj = json.loads(candidate)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(obj, dict):
                return obj

        start = candidate.find("{")
        while start != -1:
            try:
                obj, _ = _DECODER.raw_decode(candidate, start)
            except json.JSONDecodeError:
                pass
            else:
                if isinstance(obj, dict):
                    return obj
            start = candidate.find("{", start + 1)
    return None


def truncate(text: str, limit: int = 120) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[: limit - 3] + "..."
