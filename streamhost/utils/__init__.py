"""Utility functions for streamhost."""

from streamhost.utils.helpers import ensure_dir, now_ms, parse_json_object, render_template, string_to_uuid

__all__ = ["ensure_dir", "now_ms", "parse_json_object", "render_template", "string_to_uuid"]
