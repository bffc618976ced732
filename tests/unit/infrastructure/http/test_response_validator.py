import json

import pytest

from moviesdb.domain.models.endpoints import Endpoint, get_descriptor
from moviesdb.domain.models.errors import MalformedResponseError, ProviderApiError
from moviesdb.infrastructure.http.response_validator import ResponseValidator


@pytest.fixture
def validator():
    return ResponseValidator()


def test_parses_paginated_envelope(validator):
    body = json.dumps({
        "page": 2, "next": "/titles?page=3", "entries": 2,
        "results": [{"id": "tt0000001"}, {"id": "tt0000002"}],
    })
    envelope = validator.parse(body, get_descriptor(Endpoint.TITLES))
    assert envelope.page == 2
    assert envelope.next == "/titles?page=3"
    assert envelope.entries == 2
    assert envelope.has_next
    assert [item["id"] for item in envelope.results] == ["tt0000001", "tt0000002"]


def test_unknown_item_fields_pass_through(validator):
    item = {"id": "tt0111161", "titleText": {"text": "The Shawshank Redemption"}, "brandNewField": [1, 2]}
    envelope = validator.parse(json.dumps({"results": item}), get_descriptor(Endpoint.TITLE))
    assert envelope.results == item


def test_null_single_object_is_accepted(validator):
    envelope = validator.parse('{"results": null}', get_descriptor(Endpoint.TITLE_RATINGS))
    assert envelope.results is None
    assert not envelope.has_next


def test_error_envelope_raises_provider_error(validator):
    body = json.dumps({"error": {"code": "NOT_FOUND", "message": "Title not found", "details": "tt0"}})
    with pytest.raises(ProviderApiError) as excinfo:
        validator.parse(body, get_descriptor(Endpoint.TITLE), status_code=200)
    assert excinfo.value.code == "NOT_FOUND"
    assert excinfo.value.message == "Title not found"
    assert excinfo.value.details == "tt0"
    assert excinfo.value.status_code == 200


@pytest.mark.parametrize("body", [
    '{"unexpected": true}',
    '{"results": [], "error": {"code": "X", "message": "y"}}',
    '{"error": "just a string"}',
    '{"error": {"code": 12, "message": "numeric code"}}',
    '[1, 2, 3]',
    'not json at all',
    '',
])
def test_structurally_invalid_bodies_are_malformed(validator, body):
    with pytest.raises(MalformedResponseError):
        validator.parse(body, get_descriptor(Endpoint.TITLES))


@pytest.mark.parametrize("payload", [
    {"results": [], "page": "1"},
    {"results": [], "page": True},
    {"results": [], "entries": 1.5},
    {"results": [], "next": 3},
])
def test_bad_pagination_fields_are_malformed(validator, payload):
    with pytest.raises(MalformedResponseError):
        validator.parse(json.dumps(payload), get_descriptor(Endpoint.TITLES))


def test_list_items_need_the_id_field(validator):
    with pytest.raises(MalformedResponseError, match="without 'id'"):
        validator.parse('{"results": [{"titleText": {}}]}', get_descriptor(Endpoint.TITLES))


def test_actors_are_identified_by_nconst(validator):
    envelope = validator.parse('{"results": [{"nconst": "nm0000151"}]}', get_descriptor(Endpoint.ACTORS))
    assert envelope.results == [{"nconst": "nm0000151"}]
    with pytest.raises(MalformedResponseError):
        validator.parse('{"results": [{"id": "nm0000151"}]}', get_descriptor(Endpoint.ACTORS))


def test_utility_lookups_hold_plain_values(validator):
    envelope = validator.parse('{"results": [null, "Action", "Drama"]}', get_descriptor(Endpoint.UTILS_GENRES))
    assert envelope.results == [None, "Action", "Drama"]
    with pytest.raises(MalformedResponseError):
        validator.parse('{"results": [{"id": 1}]}', get_descriptor(Endpoint.UTILS_GENRES))


def test_without_descriptor_only_the_envelope_is_checked(validator):
    envelope = validator.parse('{"results": "anything"}')
    assert envelope.results == "anything"
