from __future__ import annotations

from typing import Any

from django.conf import settings
from rest_framework import serializers

from post_relay.posts.errors import map_error_details

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def string_field(**kwargs: Any) -> serializers.CharField:
    """A ``CharField`` that keeps caller text byte for byte."""

    return serializers.CharField(trim_whitespace=False, **kwargs)


class ChatSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=INT64_MIN, max_value=INT64_MAX)
    type = serializers.ChoiceField(
        choices=["private", "group", "supergroup", "channel"],
    )
    title = string_field(required=False)
    username = string_field(required=False)
    first_name = string_field(required=False)
    last_name = string_field(required=False)


class EntityUserSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=INT64_MIN, max_value=INT64_MAX)
    is_bot = serializers.BooleanField()
    first_name = string_field()
    last_name = string_field(required=False)
    username = string_field(required=False)


class MessageEntitySerializer(serializers.Serializer):
    type = string_field()
    offset = serializers.IntegerField()
    length = serializers.IntegerField()
    url = string_field(required=False)
    custom_emoji_id = string_field(required=False)
    lang = string_field(required=False)
    language = string_field(required=False)
    user = EntityUserSerializer(required=False)


class PhotoSizeSerializer(serializers.Serializer):
    file_id = string_field()
    file_unique_id = string_field()
    width = serializers.IntegerField()
    height = serializers.IntegerField()
    file_size = serializers.IntegerField(required=False)


class VideoSerializer(serializers.Serializer):
    file_id = string_field()
    file_unique_id = string_field()
    width = serializers.IntegerField()
    height = serializers.IntegerField()
    duration = serializers.IntegerField()
    thumb = PhotoSizeSerializer(required=False)
    mime_type = string_field(required=False)
    file_size = serializers.IntegerField(required=False)


class PostSerializer(serializers.Serializer):
    """Structural contract for a Post.

    One base schema; ``tailor`` picks a context from ``TAILORED_REQUIRED``
    which lists the extra fields that context makes mandatory. Fields that
    are not declared here are dropped from ``validated_data``.

    On the read side ``None`` values are omitted so an absent optional field
    stays absent.
    """

    TAILORED_REQUIRED: dict[str, tuple[str, ...]] = {
        "create": ("message_id",),
        "update": ("message_id",),
    }

    message_id = serializers.IntegerField(
        required=False,
        min_value=INT32_MIN,
        max_value=INT32_MAX,
    )
    date = serializers.IntegerField(min_value=INT32_MIN, max_value=INT32_MAX)
    chat = ChatSerializer()
    text = string_field(required=False)
    caption = string_field(required=False)
    entities = MessageEntitySerializer(many=True, required=False)
    caption_entities = MessageEntitySerializer(many=True, required=False)
    media_group_id = string_field(required=False)
    photo = PhotoSizeSerializer(many=True, required=False)
    video = VideoSerializer(required=False)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def __init__(self, *args: Any, tailor: str | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        if tailor is None:
            return
        if tailor not in self.TAILORED_REQUIRED:
            msg = f"Unknown schema context: {tailor!r}"
            raise ValueError(msg)
        for name in self.TAILORED_REQUIRED[tailor]:
            self.fields[name].required = True

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {key: value for key, value in data.items() if value is not None}


class PageSerializer(serializers.Serializer):
    offset = serializers.IntegerField(min_value=0, required=False, default=0)
    limit = serializers.IntegerField(min_value=1, required=False)

    def validate_limit(self, value: int) -> int:
        max_size = settings.POSTS_MAX_PAGE_SIZE
        if value > max_size:
            msg = f"Ensure this value is less than or equal to {max_size}."
            raise serializers.ValidationError(msg)
        return value


def validate_post(
    payload: Any,
    tailor: str,
) -> tuple[dict[str, Any] | None, list[dict[str, str]]]:
    """Validate ``payload`` in the ``tailor`` context.

    Returns ``(value, [])`` on success and ``(None, details)`` otherwise,
    where ``details`` lists every failing field, not just the first.
    """

    serializer = PostSerializer(data=payload, tailor=tailor)
    if serializer.is_valid():
        return serializer.validated_data, []
    return None, map_error_details(serializer.errors)


def validate_identifier(value: Any) -> int | None:
    """Return ``value`` as an integer id, or ``None`` when it is not numeric."""

    if value is None or isinstance(value, bool):
        return None
    try:
        return serializers.IntegerField().run_validation(value)
    except serializers.ValidationError:
        return None


def validate_page(
    offset: Any = None,
    limit: Any = None,
) -> tuple[tuple[int, int] | None, list[dict[str, str]]]:
    data = {}
    if offset is not None:
        data["offset"] = offset
    if limit is not None:
        data["limit"] = limit
    serializer = PageSerializer(data=data)
    if not serializer.is_valid():
        return None, map_error_details(serializer.errors)
    page = serializer.validated_data
    return (page["offset"], page.get("limit", settings.POSTS_PAGE_SIZE)), []
