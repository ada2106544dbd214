"""Connection gate for the privileged ``/post`` namespace.

A peer must present a compact JWS signed with ES256 whose payload is exactly
``settings.POST_NAMESPACE_TOKEN_PAYLOAD``. Every failure collapses into a
refused connection; the reason only goes to the log.
"""

from __future__ import annotations

import binascii
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import jwt
from asgiref.sync import sync_to_async
from django.conf import settings
from jwt.utils import base64url_decode

logger = logging.getLogger(__name__)

ALGORITHM = "ES256"
PEM_MARKER = "-----BEGIN"


class TokenRejected(Exception):  # noqa: N818
    """The handshake token did not pass verification."""


@dataclass(frozen=True)
class GateDecision:
    admitted: bool
    reason: str | None = None


ADMITTED = GateDecision(admitted=True)


def extract_token(environ: dict[str, Any] | None, auth: Any | None) -> str | None:
    """Extract the token from Socket.IO handshake auth data.

    Falls back to a ``token`` query-string parameter; handles python-socketio
    environ shapes across ASGI/WSGI servers.
    """

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token
    return None


def load_public_key(encoded: str) -> str:
    """Return PEM text for a key given either as PEM or base64url-encoded PEM."""

    encoded = (encoded or "").strip()
    if not encoded:
        msg = "public key is not configured"
        raise TokenRejected(msg)
    if encoded.startswith(PEM_MARKER):
        return encoded
    try:
        pem = base64url_decode(encoded.encode("ascii")).decode("ascii")
    except (binascii.Error, UnicodeError, ValueError) as exc:
        msg = "public key is not valid base64url"
        raise TokenRejected(msg) from exc
    if not pem.startswith(PEM_MARKER):
        msg = "public key is not PEM encoded"
        raise TokenRejected(msg)
    return pem


def verify_token(token: str, public_key: str, expected_payload: str) -> None:
    """Raise :class:`TokenRejected` unless ``token`` is a valid ES256 JWS over
    ``expected_payload``."""

    if not token:
        msg = "missing token"
        raise TokenRejected(msg)
    try:
        payload = jwt.PyJWS().decode(token, key=public_key, algorithms=[ALGORITHM])
    except jwt.InvalidSignatureError as exc:
        msg = "bad signature"
        raise TokenRejected(msg) from exc
    except jwt.PyJWTError as exc:
        msg = f"malformed token or key: {exc}"
        raise TokenRejected(msg) from exc
    except (ValueError, TypeError) as exc:
        msg = f"malformed key: {exc}"
        raise TokenRejected(msg) from exc

    if payload != expected_payload.encode("utf-8"):
        msg = "unexpected payload"
        raise TokenRejected(msg)


def _check(token: str | None) -> None:
    if not token:
        msg = "missing token"
        raise TokenRejected(msg)
    public_key = load_public_key(settings.POST_NAMESPACE_PUBLIC_KEY)
    verify_token(token, public_key, settings.POST_NAMESPACE_TOKEN_PAYLOAD)


async def admit_connection(
    environ: dict[str, Any] | None,
    auth: Any | None,
) -> GateDecision:
    """Decide whether a connection attempt may join the gated namespace."""

    token = extract_token(environ, auth)
    try:
        await sync_to_async(_check, thread_sensitive=False)(token)
    except TokenRejected as exc:
        logger.warning("Rejected /post connection: %s", exc)
        return GateDecision(admitted=False, reason=str(exc))
    return ADMITTED
