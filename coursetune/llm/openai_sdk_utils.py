# coursetune/llm/openai_sdk_utils.py

from __future__ import annotations

import json
from typing import Any, Dict, Optional


def sdk_to_dict(obj: Any) -> Dict[str, Any]:
    """
    Convert an OpenAI SDK object into a plain dict when possible.

    Tries the SDK serialization helpers (pydantic ``model_dump``, ``to_dict``,
    ``json``) in turn. If a plain dict is provided, it is returned unchanged;
    anything else yields an empty dict.
    """
    if isinstance(obj, dict):
        return obj
    for attr in ("model_dump", "to_dict"):
        fn = getattr(obj, attr, None)
        if callable(fn):
            result = fn()
            if isinstance(result, dict):
                return result
    j = getattr(obj, "json", None)
    if callable(j):
        try:
            parsed = json.loads(j())
        except (TypeError, ValueError):
            parsed = None
        if isinstance(parsed, dict):
            return parsed
    return {}


def coerce_file_id(candidate: Any) -> Optional[str]:
    """
    Attempt to coerce various SDK response shapes into a file_id string.
    Supports str, SDK objects with an ``id`` attribute, dict-like with
    id/file_id, and one-item lists of either.
    """
    if isinstance(candidate, str) and candidate:
        return candidate
    if isinstance(candidate, dict):
        cid = candidate.get("id") or candidate.get("file_id")
        return cid if isinstance(cid, str) and cid else None
    if isinstance(candidate, list) and candidate:
        return coerce_file_id(candidate[0])
    cid = getattr(candidate, "id", None)
    return cid if isinstance(cid, str) and cid else None
