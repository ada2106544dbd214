from django.db import models


class Post(models.Model):
    """A forwarded chat message.

    ``message_id`` is supplied by the caller; the store never generates it.
    Nested Telegram objects (chat, entities, media) are kept as JSON.
    """

    message_id = models.IntegerField(primary_key=True)
    date = models.IntegerField()
    chat = models.JSONField()
    text = models.TextField(null=True, blank=True)
    caption = models.TextField(null=True, blank=True)
    entities = models.JSONField(null=True, blank=True)
    caption_entities = models.JSONField(null=True, blank=True)
    media_group_id = models.TextField(null=True, blank=True)
    photo = models.JSONField(null=True, blank=True)
    video = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Fields a save replaces wholesale; absent ones are reset to null.
    REPLACEABLE_FIELDS = (
        "date",
        "chat",
        "text",
        "caption",
        "entities",
        "caption_entities",
        "media_group_id",
        "photo",
        "video",
    )

    class Meta:
        db_table = "posts"
        ordering = ["-message_id"]

    def __str__(self):
        return f"Post {self.message_id} ({self.date})"
