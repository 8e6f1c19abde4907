"""Envelope validation — turn a parsed JSON value into a typed MCP request.

:func:`classify` sorts every incoming message into one of three buckets:

* a :class:`Notification` (no ``id`` member), which never gets a response;
* one of the typed request models from :mod:`cloudcontrol.protocols.mcp.models`;
* an :class:`~cloudcontrol.protocols.errors.InvalidRequestError`, raised
  with the code, message and echoed ``id`` of the error response.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cloudcontrol.protocols.errors import INVALID_PARAMS, INVALID_REQUEST, InvalidRequestError
from cloudcontrol.protocols.mcp.models import MCPRequest

logger = logging.getLogger(__name__)

# Clients depend on this exact wording for rejected envelopes, even though
# the fault is theirs rather than the server's.
INVALID_ENVELOPE_MESSAGE = "Internal Server Error"
INVALID_REQUEST_MESSAGE = "Invalid Request"

# Used when a rejected message has no usable id to echo.
FALLBACK_ID = 0

_REQUEST_ADAPTER: TypeAdapter[MCPRequest] = TypeAdapter(MCPRequest)


@dataclass(frozen=True)
class Notification:
    """A message without an ``id``; acknowledged silently."""

    method: Any = None


def echo_id(message: Mapping[str, Any]) -> Any:
    """Return the ``id`` to put on an error response for *message*.

    JSON scalars are echoed as sent; anything else (objects, arrays,
    booleans) falls back to :data:`FALLBACK_ID`.
    """
    value = message.get("id", FALLBACK_ID)
    if value is None or (isinstance(value, (int, float, str)) and not isinstance(value, bool)):
        return value
    return FALLBACK_ID


def classify(message: Any) -> MCPRequest | Notification:
    """Validate *message* and return the typed request or a :class:`Notification`.

    Raises:
        InvalidRequestError: ``-32600`` if *message* is not a JSON object,
            ``-32602`` if it is an object with an ``id`` that matches none of
            the supported request shapes.
    """
    if not isinstance(message, Mapping):
        raise InvalidRequestError(
            INVALID_REQUEST_MESSAGE,
            code=INVALID_REQUEST,
            request_id=FALLBACK_ID,
        )

    if "id" not in message:
        return Notification(method=message.get("method"))

    try:
        return _REQUEST_ADAPTER.validate_python(dict(message))
    except ValidationError as exc:
        issues = exc.errors(include_url=False, include_input=False)
        logger.debug("Rejected JSON-RPC envelope: %s", issues)
        raise InvalidRequestError(
            INVALID_ENVELOPE_MESSAGE,
            code=INVALID_PARAMS,
            request_id=echo_id(message),
        ) from exc
