from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from post_relay.realtime.connection import Connection

POST_CREATED = "post:created"
POST_UPDATED = "post:updated"
POST_DELETED = "post:deleted"


async def publish_post_created(connection: Connection, post: dict[str, Any]) -> None:
    """Tell the sender's peers about a newly persisted post."""

    await connection.broadcast.emit(POST_CREATED, post)


async def publish_post_updated(connection: Connection, post: dict[str, Any]) -> None:
    await connection.broadcast.emit(POST_UPDATED, post)


async def publish_post_deleted(connection: Connection, post_id: int) -> None:
    await connection.broadcast.emit(POST_DELETED, post_id)
