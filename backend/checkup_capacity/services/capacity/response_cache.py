# backend/checkup_capacity/services/capacity/response_cache.py
"""
Response cache layer: canonical JSON, weak ETag, conditional GET.

The body is serialised with sorted keys and fixed separators, so the same
resolver output always hashes to the same ETag and any change to a single
day/resource changes it.
"""

import base64
import hashlib
import json

from fastapi import Response

from .config import CapacityConfig, get_capacity_config

JSON_MEDIA_TYPE = "application/json; charset=utf-8"
VARY = "X-Tenant"


def canonical_json(data) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def weak_etag(body: str) -> str:
    """W/"<base64 sha1>" of the serialised body."""
    digest = hashlib.sha1(body.encode("utf-8")).digest()
    return f'W/"{base64.b64encode(digest).decode("ascii")}"'


def _opaque(tag: str) -> str:
    tag = tag.strip()
    if tag.startswith("W/"):
        tag = tag[2:]
    return tag


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """Weak comparison against an If-None-Match header (list or "*")."""
    if not if_none_match:
        return False
    candidates = [c.strip() for c in if_none_match.split(",") if c.strip()]
    if "*" in candidates:
        return True
    target = _opaque(etag)
    return any(_opaque(c) == target for c in candidates)


def conditional_json_response(
    data,
    if_none_match: str | None,
    config: CapacityConfig | None = None,
) -> Response:
    """
    200 with body and ETag, or 304 with an empty body when the client's
    copy is current. Both carry the public short-lived cache policy.
    """
    config = config or get_capacity_config()
    body = canonical_json(data)
    etag = weak_etag(body)
    headers = {
        "ETag": etag,
        "Cache-Control": config.public_cache_control,
        "Vary": VARY,
    }

    if etag_matches(if_none_match, etag):
        return Response(status_code=304, headers=headers)

    return Response(content=body, status_code=200, media_type=JSON_MEDIA_TYPE, headers=headers)
