import logging

from post_relay.posts.errors import EntityNotFound
from post_relay.posts.errors import Errors
from post_relay.posts.errors import map_error_details
from post_relay.posts.errors import sanitize_error_message


def test_entity_not_found_is_passed_through():
    assert sanitize_error_message(EntityNotFound()) == Errors.ENTITY_NOT_FOUND


def test_other_errors_are_sanitized_and_logged(caplog):
    exc = RuntimeError("password authentication failed for user postgres")
    with caplog.at_level(logging.ERROR, logger="post_relay.posts.errors"):
        message = sanitize_error_message(exc)

    assert message == Errors.UNKNOWN_ERROR
    assert "postgres" not in message
    assert caplog.records[0].exc_info[1] is exc


def test_map_error_details_flattens_nested_paths():
    errors = {
        "chat": {"id": ["A valid integer is required."]},
        "entities": [{}, {"type": ["This field is required."]}],
        "non_field_errors": ["Invalid data."],
    }
    assert map_error_details(errors) == [
        {"field": "chat.id", "message": "A valid integer is required."},
        {"field": "entities.1.type", "message": "This field is required."},
        {"field": "non_field_errors", "message": "Invalid data."},
    ]


def test_map_error_details_reports_object_errors_on_parent():
    errors = {"chat": {"non_field_errors": ["Expected a dictionary."]}}
    assert map_error_details(errors) == [
        {"field": "chat", "message": "Expected a dictionary."},
    ]
