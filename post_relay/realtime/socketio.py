"""Socket.IO server for post clients.

Two namespaces share one server:
- ``/``: public reads, ``post:read`` and ``post:list``
- ``/post``: gated writes, ``post:create``, ``post:update``, ``post:delete``

Handler return values are sent back as the Socket.IO acknowledgement, so a
client emitting with a callback receives the response envelope. Successful
writes are broadcast to the other ``/post`` connections as ``post:created``,
``post:updated`` and ``post:deleted``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import socketio
from django.conf import settings
from socketio import exceptions as socketio_exceptions

from post_relay.posts.handlers import PostHandlers
from post_relay.posts.repository import DjangoPostRepository
from post_relay.posts.repository import PostRepository
from post_relay.realtime.connection import Connection
from post_relay.realtime.gate import admit_connection

logger = logging.getLogger(__name__)

PUBLIC_NAMESPACE = "/"
POST_NAMESPACE = "/post"


@dataclass(frozen=True)
class Components:
    post_repository: PostRepository


def build_client_manager() -> socketio.AsyncManager | None:
    """Share broadcasts between processes when Redis is configured."""

    url = getattr(settings, "REDIS_URL", "")
    if not url:
        return None
    return socketio.AsyncRedisManager(url)


def create_application(
    components: Components,
    client_manager: socketio.AsyncManager | None = None,
) -> socketio.AsyncServer:
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=settings.CORS_ALLOWED_ORIGINS,
        client_manager=client_manager,
        logger=False,
        engineio_logger=False,
    )
    handlers = PostHandlers(components.post_repository)

    # Public namespace.

    async def read_post(sid: str, post_id: Any = None):
        return await handlers.read_post(post_id)

    async def list_post(sid: str, offset: Any = None, limit: Any = None):
        connection = Connection.for_sid(sio, sid, PUBLIC_NAMESPACE)
        return await handlers.list_post(connection, offset, limit)

    sio.on("post:read", read_post, namespace=PUBLIC_NAMESPACE)
    sio.on("post:list", list_post, namespace=PUBLIC_NAMESPACE)

    # Gated namespace.

    async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
        decision = await admit_connection(environ, auth)
        if not decision.admitted:
            reason = "unauthorized"
            raise socketio_exceptions.ConnectionRefusedError(reason)
        logger.debug("Admitted %s to %s", sid, POST_NAMESPACE)

    async def create_post(sid: str, payload: Any = None):
        connection = Connection.for_sid(sio, sid, POST_NAMESPACE)
        return await handlers.create_post(connection, payload)

    async def update_post(sid: str, payload: Any = None):
        connection = Connection.for_sid(sio, sid, POST_NAMESPACE)
        return await handlers.update_post(connection, payload)

    async def delete_post(sid: str, post_id: Any = None):
        connection = Connection.for_sid(sio, sid, POST_NAMESPACE)
        return await handlers.delete_post(connection, post_id)

    sio.on("connect", connect, namespace=POST_NAMESPACE)
    sio.on("post:create", create_post, namespace=POST_NAMESPACE)
    sio.on("post:update", update_post, namespace=POST_NAMESPACE)
    sio.on("post:delete", delete_post, namespace=POST_NAMESPACE)

    return sio


sio = create_application(
    Components(post_repository=DjangoPostRepository()),
    client_manager=build_client_manager(),
)
