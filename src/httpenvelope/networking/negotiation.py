"""Header merging and Content-Type auto-detection."""

from __future__ import annotations

import json
from typing import Mapping

from .types import Body, RawBody

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

HEADER_CONTENT_TYPE = "Content-Type"

_METHODS_WITHOUT_BODY = frozenset({"GET", "DELETE"})


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings left to right; later layers win."""
    merged: dict[str, str] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def body_is_json(body: Body) -> bool:
    """Return True when a raw text body is valid JSON."""
    if not isinstance(body, RawBody) or not body.is_text:
        return False
    try:
        json.loads(body.text)
    except ValueError:
        return False
    return True


def detect_content_type(method: str, body: Body) -> str | None:
    """Pick the default Content-Type for a request, if it needs one."""
    if method.upper() in _METHODS_WITHOUT_BODY:
        return None
    if body_is_json(body):
        return CONTENT_TYPE_JSON
    return CONTENT_TYPE_FORM


def negotiate_headers(
    method: str, body: Body, headers: Mapping[str, str]
) -> dict[str, str]:
    """Return ``headers`` with a detected Content-Type added as a default.

    A Content-Type already present in ``headers`` (any letter case) is
    left untouched.
    """
    content_type = detect_content_type(method, body)
    if content_type is None:
        return dict(headers)
    if any(name.lower() == "content-type" for name in headers):
        return dict(headers)
    return merge_headers({HEADER_CONTENT_TYPE: content_type}, headers)
