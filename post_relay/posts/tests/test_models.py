import pytest
from django.apps import apps
from django.db import IntegrityError
from django.db import models

from post_relay.posts.models import Post

CHAT = {"id": -1001391712027, "type": "channel"}


@pytest.mark.django_db
class TestPost:
    def test_message_id_is_the_primary_key(self):
        post = Post.objects.create(message_id=255, date=1680514605, chat=CHAT)
        assert post.pk == 255
        assert Post._meta.pk.name == "message_id"  # noqa: SLF001
        assert str(post) == "Post 255 (1680514605)"

    def test_optional_fields_default_to_null(self):
        post = Post.objects.create(message_id=1, date=1, chat=CHAT)
        post.refresh_from_db()
        assert post.text is None
        assert post.entities is None
        assert post.video is None
        assert post.created_at is not None

    def test_default_ordering_is_newest_first(self):
        for message_id in (2, 9, 4):
            Post.objects.create(message_id=message_id, date=message_id, chat=CHAT)
        assert list(Post.objects.values_list("message_id", flat=True)) == [9, 4, 2]

    def test_chat_is_required(self):
        with pytest.raises(IntegrityError):
            Post.objects.create(message_id=3, date=3, chat=None)


def test_no_model_field_is_auto_generated():
    app_config = apps.get_app_config("posts")
    for model in app_config.get_models():
        assert not isinstance(model._meta.pk, models.AutoField)  # noqa: SLF001
    assert "default_auto_field" not in type(app_config).__dict__
