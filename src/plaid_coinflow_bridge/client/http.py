from __future__ import annotations

import asyncio
from typing import Any

import requests

from ..errors import HttpStatusError, NetworkError, ProtocolViolation


async def send(
    session: requests.Session,
    method: str,
    url: str,
    *,
    raise_for_status: bool = True,
    **kwargs: Any,
) -> requests.Response:
    """Issue a blocking ``requests`` call off the event loop.

    Transport failures, and non-2xx statuses when ``raise_for_status`` is set,
    are raised as ``NetworkError``; non-2xx statuses use its
    ``HttpStatusError`` subclass.
    """
    try:
        resp = await asyncio.to_thread(session.request, method, url, **kwargs)
    except requests.RequestException as err:
        raise NetworkError(f"{method} {url} failed: {err}", url=url) from err
    if raise_for_status and not 200 <= resp.status_code < 300:
        raise HttpStatusError(
            f"{method} {url} returned {resp.status_code}: {resp.text[:200]}",
            url=url,
            status_code=resp.status_code,
        )
    return resp


def json_body(resp: requests.Response) -> dict[str, Any]:
    """Decode a JSON object body, raising ``ProtocolViolation`` otherwise."""
    try:
        data = resp.json()
    except ValueError as err:
        raise ProtocolViolation("body", f"invalid JSON response: {resp.text[:200]}") from err
    if not isinstance(data, dict):
        raise ProtocolViolation("body", "expected a JSON object")
    return data


def require_field(data: dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None or value == "":
        raise ProtocolViolation(name)
    return value
