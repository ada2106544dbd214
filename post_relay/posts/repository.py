"""Persistence boundary for posts.

Each operation runs its ORM work inside ``transaction.atomic()`` on a worker
thread, so the event loop only suspends while the store is busy. The paged
listing is served through :class:`PagedListCache`; writes clear it.
"""

from __future__ import annotations

import abc
import logging
from typing import Any

from channels.db import database_sync_to_async
from django.conf import settings
from django.db import transaction

from post_relay.posts.cache import PagedListCache
from post_relay.posts.errors import EntityNotFound
from post_relay.posts.models import Post

logger = logging.getLogger(__name__)


class PostRepository(abc.ABC):
    @abc.abstractmethod
    async def find_all_offset(self, offset: int, limit: int) -> list[Post]:
        """Return one page of posts, newest ``message_id`` first."""

    @abc.abstractmethod
    async def find_by_id(self, post_id: int) -> Post:
        """Return the post or raise :class:`EntityNotFound`."""

    @abc.abstractmethod
    async def save(self, entity: dict[str, Any]) -> tuple[Post, bool]:
        """Insert or replace by ``message_id``; returns ``(post, created)``."""

    @abc.abstractmethod
    async def delete_by_id(self, post_id: int) -> None:
        """Delete the post or raise :class:`EntityNotFound`."""


class DjangoPostRepository(PostRepository):
    def __init__(self, cache: PagedListCache | None = None) -> None:
        if cache is None:
            cache = PagedListCache(ttl=settings.POSTS_LIST_CACHE_TTL)
        self.cache = cache

    async def find_all_offset(self, offset: int, limit: int) -> list[Post]:
        return await self.cache.get_or_load(
            (offset, limit),
            lambda: _find_all_offset(offset, limit),
        )

    async def find_by_id(self, post_id: int) -> Post:
        return await _find_by_id(post_id)

    async def save(self, entity: dict[str, Any]) -> tuple[Post, bool]:
        result = await _save(entity)
        self.cache.invalidate()
        return result

    async def delete_by_id(self, post_id: int) -> None:
        await _delete_by_id(post_id)
        self.cache.invalidate()


@database_sync_to_async
def _find_all_offset(offset: int, limit: int) -> list[Post]:
    with transaction.atomic():
        return list(Post.objects.order_by("-message_id")[offset : offset + limit])


@database_sync_to_async
def _find_by_id(post_id: int) -> Post:
    with transaction.atomic():
        post = Post.objects.filter(message_id=post_id).first()
    if post is None:
        raise EntityNotFound
    return post


@database_sync_to_async
def _save(entity: dict[str, Any]) -> tuple[Post, bool]:
    defaults = {name: entity.get(name) for name in Post.REPLACEABLE_FIELDS}
    with transaction.atomic():
        post, created = Post.objects.update_or_create(
            message_id=entity["message_id"],
            defaults=defaults,
        )
    logger.debug("Post %s %s", post.message_id, "created" if created else "replaced")
    return post, created


@database_sync_to_async
def _delete_by_id(post_id: int) -> None:
    with transaction.atomic():
        count, _ = Post.objects.filter(message_id=post_id).delete()
    if count == 0:
        raise EntityNotFound
