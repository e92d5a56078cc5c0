from __future__ import annotations

import json
from typing import Any

import yaml


# --------------------------
# Helpers
# --------------------------

def looks_like_list(raw: Any) -> bool:
    if not isinstance(raw, str):
        return False
    s = raw.strip()
    return s.startswith('[') and s.endswith(']')


def _parse_list(text: str) -> Any:
    # Deno.inspect quotes strings with either quote style; JSON only accepts double.
    normalized = text.replace("'", '"')
    try:
        return json.loads(normalized)
    except ValueError:
        pass
    # YAML flow sequences also accept inspect's bare keys and atoms (`{ a: 1 }`, `undefined`).
    try:
        return yaml.safe_load(normalized)
    except yaml.YAMLError:
        return None


# --------------------------
# Public API
# --------------------------

def deserialize(raw: Any) -> Any:
    """
    Convert interpreter output into a Python value.

    Only text shaped like a bracketed list is decoded; everything else, and
    any bracketed text that does not parse into a list, is returned as-is.
    Strings that themselves contain quote characters do not survive the
    quote normalization and fall back to the raw text or decode lossily.
    """
    if not looks_like_list(raw):
        return raw
    value = _parse_list(raw.strip())
    if isinstance(value, list):
        return value
    return raw


__all__ = [
    "deserialize",
    "looks_like_list",
]
