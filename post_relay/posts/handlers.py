"""Validate -> persist -> broadcast -> respond, one method per operation.

Every handler returns its response instead of raising, so the transport can
forward it as an acknowledgement. Responses are either the bare value
(create/update/delete), ``{"data": ...}``, or
``{"error": ..., "errorDetails": [...]}``.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from typing import Any

from post_relay.posts.api.serializers import PostSerializer
from post_relay.posts.api.serializers import validate_identifier
from post_relay.posts.api.serializers import validate_page
from post_relay.posts.api.serializers import validate_post
from post_relay.posts.errors import Errors
from post_relay.posts.errors import sanitize_error_message
from post_relay.realtime.events.posts import publish_post_created
from post_relay.realtime.events.posts import publish_post_deleted
from post_relay.realtime.events.posts import publish_post_updated

if TYPE_CHECKING:  # import for type checking only
    from post_relay.posts.repository import PostRepository
    from post_relay.realtime.connection import Connection

logger = logging.getLogger(__name__)


def invalid_payload(details: list[dict[str, str]]) -> dict[str, Any]:
    return {"error": Errors.INVALID_PAYLOAD, "errorDetails": details}


def error_response(exc: BaseException) -> dict[str, Any]:
    return {"error": sanitize_error_message(exc)}


async def _broadcast(publish, connection: Connection, payload: Any) -> None:
    # Fan-out runs after the write; failures are logged only.
    try:
        await publish(connection, payload)
    except Exception:
        logger.exception("Broadcast via %s failed", publish.__name__)


class PostHandlers:
    def __init__(self, repository: PostRepository) -> None:
        self.repository = repository

    async def create_post(self, connection: Connection, payload: Any) -> Any:
        return await self._save_post(
            connection,
            payload,
            tailor="create",
            publish=publish_post_created,
        )

    async def read_post(
        self,
        post_id: Any,
        callback: Callable[[dict[str, Any]], Any] | None = None,
    ) -> dict[str, Any]:
        """Look a post up by id.

        ``callback``, when given, receives the same response that is returned.
        """

        response = await self._read_post(post_id)
        if callback is not None:
            result = callback(response)
            if inspect.isawaitable(result):
                await result
        return response

    async def update_post(self, connection: Connection, payload: Any) -> Any:
        return await self._save_post(
            connection,
            payload,
            tailor="update",
            publish=publish_post_updated,
        )

    async def delete_post(self, connection: Connection, post_id: Any) -> Any:
        identifier = validate_identifier(post_id)
        if identifier is None:
            return {"error": Errors.ENTITY_NOT_FOUND}

        try:
            await self.repository.delete_by_id(identifier)
        except Exception as exc:  # noqa: BLE001
            return error_response(exc)

        await _broadcast(publish_post_deleted, connection, identifier)
        return identifier

    async def list_post(
        self,
        connection: Connection | None = None,
        offset: Any = None,
        limit: Any = None,
    ) -> dict[str, Any]:
        page, details = validate_page(offset, limit)
        if page is None:
            return invalid_payload(details)

        try:
            posts = await self.repository.find_all_offset(*page)
        except Exception as exc:  # noqa: BLE001
            return error_response(exc)

        return {"data": PostSerializer(posts or [], many=True).data}

    async def _read_post(self, post_id: Any) -> dict[str, Any]:
        identifier = validate_identifier(post_id)
        if identifier is None:
            return {"error": Errors.ENTITY_NOT_FOUND}

        try:
            post = await self.repository.find_by_id(identifier)
        except Exception as exc:  # noqa: BLE001
            return error_response(exc)

        return {"data": PostSerializer(post).data}

    async def _save_post(
        self,
        connection: Connection,
        payload: Any,
        *,
        tailor: str,
        publish: Callable[[Connection, dict[str, Any]], Any],
    ) -> Any:
        value, details = validate_post(payload, tailor)
        if value is None:
            logger.info("Rejected %s payload: %s", tailor, details)
            return invalid_payload(details)

        try:
            await self.repository.save(value)
        except Exception as exc:  # noqa: BLE001
            return error_response(exc)

        # The store call has returned, so the write is committed.
        await _broadcast(publish, connection, value)
        return value
