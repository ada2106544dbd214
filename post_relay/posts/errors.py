"""Error taxonomy shared by the post handlers and repository.

Callers only ever see the string constants in :class:`Errors`; raw exception
text stays in the operational log.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework.settings import api_settings

logger = logging.getLogger(__name__)


class Errors:
    INVALID_PAYLOAD = "invalid payload"
    ENTITY_NOT_FOUND = "entity not found"
    UNKNOWN_ERROR = "an unknown error has occurred"


class EntityNotFound(Exception):  # noqa: N818
    """No row matched the requested id (or none was affected)."""

    def __init__(self, message: str = Errors.ENTITY_NOT_FOUND):
        super().__init__(message)


def sanitize_error_message(exc: BaseException) -> str:
    """Map a store-layer exception to a message safe to return to a peer."""

    if isinstance(exc, EntityNotFound):
        return Errors.ENTITY_NOT_FOUND
    logger.error("Unexpected store error", exc_info=exc)
    return Errors.UNKNOWN_ERROR


def map_error_details(errors: Any, path: str = "") -> list[dict[str, str]]:
    """Flatten DRF serializer errors into an ordered ``{field, message}`` list.

    Nested objects contribute dotted paths (``chat.id``) and list items their
    index (``entities.1.type``). Object-level errors are reported on the
    parent path, or on ``non_field_errors`` at the top level.
    """

    details: list[dict[str, str]] = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                child = path or key
            else:
                child = f"{path}.{key}" if path else str(key)
            details.extend(map_error_details(value, child))
    elif isinstance(errors, list):
        for index, value in enumerate(errors):
            if isinstance(value, (dict, list)):
                details.extend(map_error_details(value, f"{path}.{index}"))
            else:
                details.append(
                    {
                        "field": path or api_settings.NON_FIELD_ERRORS_KEY,
                        "message": str(value),
                    }
                )
    else:
        details.append(
            {
                "field": path or api_settings.NON_FIELD_ERRORS_KEY,
                "message": str(errors),
            }
        )
    return details
