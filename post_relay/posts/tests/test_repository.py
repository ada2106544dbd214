import pytest
from asgiref.sync import async_to_sync

from post_relay.posts.api.serializers import PostSerializer
from post_relay.posts.api.serializers import validate_post
from post_relay.posts.cache import PagedListCache
from post_relay.posts.errors import EntityNotFound
from post_relay.posts.models import Post
from post_relay.posts.repository import DjangoPostRepository

pytestmark = pytest.mark.django_db(transaction=True)


@pytest.fixture
def repository():
    return DjangoPostRepository(cache=PagedListCache(ttl=180))


def make_post(message_id, **extra):
    return {
        "message_id": message_id,
        "date": 1680514605 + message_id,
        "chat": {"id": -1001391712027, "type": "channel"},
        **extra,
    }


def test_save_then_read_round_trip(repository, post_payload):
    value, _ = validate_post(post_payload, "create")

    post, created = async_to_sync(repository.save)(value)
    found = async_to_sync(repository.find_by_id)(255)

    assert created is True
    assert post.message_id == 255
    data = PostSerializer(found).data
    for name, expected in value.items():
        assert data[name] == expected


def test_save_is_an_upsert_with_full_replace(repository):
    async_to_sync(repository.save)(make_post(1, text="first", caption="c"))
    _, created = async_to_sync(repository.save)(make_post(1, text="second"))

    assert created is False
    assert Post.objects.count() == 1
    post = Post.objects.get(message_id=1)
    assert post.text == "second"
    assert post.caption is None


def test_find_by_id_missing(repository):
    with pytest.raises(EntityNotFound):
        async_to_sync(repository.find_by_id)(404)


def test_delete_by_id(repository):
    async_to_sync(repository.save)(make_post(7))

    async_to_sync(repository.delete_by_id)(7)

    assert not Post.objects.filter(message_id=7).exists()
    with pytest.raises(EntityNotFound):
        async_to_sync(repository.delete_by_id)(7)


def test_find_all_offset_pages_newest_first(repository):
    for message_id in (3, 1, 5, 2, 4):
        async_to_sync(repository.save)(make_post(message_id))

    first = async_to_sync(repository.find_all_offset)(0, 2)
    second = async_to_sync(repository.find_all_offset)(2, 2)
    last = async_to_sync(repository.find_all_offset)(4, 2)

    assert [p.message_id for p in first] == [5, 4]
    assert [p.message_id for p in second] == [3, 2]
    assert [p.message_id for p in last] == [1]


def test_find_all_offset_on_empty_store(repository):
    assert async_to_sync(repository.find_all_offset)(0, 10) == []


def test_listing_is_served_from_cache(repository, django_assert_num_queries):
    async_to_sync(repository.save)(make_post(1))
    async_to_sync(repository.find_all_offset)(0, 10)

    with django_assert_num_queries(0):
        cached = async_to_sync(repository.find_all_offset)(0, 10)
    assert [p.message_id for p in cached] == [1]


def test_save_invalidates_cached_pages(repository):
    async_to_sync(repository.save)(make_post(1))
    assert len(async_to_sync(repository.find_all_offset)(0, 10)) == 1

    async_to_sync(repository.save)(make_post(2))
    page = async_to_sync(repository.find_all_offset)(0, 10)

    assert [p.message_id for p in page] == [2, 1]


def test_delete_invalidates_cached_pages(repository):
    async_to_sync(repository.save)(make_post(1))
    async_to_sync(repository.save)(make_post(2))
    async_to_sync(repository.find_all_offset)(0, 10)

    async_to_sync(repository.delete_by_id)(2)

    page = async_to_sync(repository.find_all_offset)(0, 10)
    assert [p.message_id for p in page] == [1]


def test_failed_delete_keeps_cache(repository):
    async_to_sync(repository.save)(make_post(1))
    async_to_sync(repository.find_all_offset)(0, 10)
    generation = repository.cache.generation

    with pytest.raises(EntityNotFound):
        async_to_sync(repository.delete_by_id)(99)

    assert repository.cache.generation == generation
