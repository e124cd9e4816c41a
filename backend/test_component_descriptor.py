"""
Tests for descriptor parsing and validation.
"""

import json

import pytest

from conftest import make_descriptor
from padma_backend.core.exceptions import MalformedDescriptorError
from padma_backend.schemas.component_descriptor import ComponentDescriptor


def parse(data, source="shared/link.json") -> ComponentDescriptor:
    return ComponentDescriptor.from_raw(json.dumps(data).encode("utf-8"), source)


def test_valid_descriptor_is_parsed():
    descriptor = parse(make_descriptor("shared.link", collectionName="components_shared_links"))

    assert descriptor.uid == "shared.link"
    assert descriptor.category == "shared"
    assert descriptor.model_name == "link"
    assert descriptor.display_name == "Link"
    assert descriptor.icon == "cube"
    assert descriptor.attributes == {"title": {"type": "string"}}


def test_empty_attributes_mapping_is_valid():
    assert parse(make_descriptor("shared.empty", attributes={})).attributes == {}


def test_invalid_json_is_malformed():
    with pytest.raises(MalformedDescriptorError) as exc_info:
        ComponentDescriptor.from_raw(b"{not json", "shared/broken.json")

    assert exc_info.value.source == "shared/broken.json"
    assert "Error parsing file: shared/broken.json" in exc_info.value.message


def test_non_object_document_is_malformed():
    with pytest.raises(MalformedDescriptorError):
        ComponentDescriptor.from_raw(b"[1, 2, 3]", "shared/list.json")


@pytest.mark.parametrize(
    "field",
    ["uid", "category", "modelName", "info.displayName", "info.icon"],
)
def test_empty_string_counts_as_missing(field):
    data = make_descriptor("shared.link")
    if field.startswith("info."):
        data["info"][field.split(".", 1)[1]] = ""
    else:
        data[field] = ""

    with pytest.raises(MalformedDescriptorError) as exc_info:
        parse(data)

    assert exc_info.value.missing_fields == [field]


def test_snake_case_keys_are_not_accepted():
    data = make_descriptor("shared.link")
    data["model_name"] = data.pop("modelName")
    data["info"] = {"display_name": "Link", "icon": "cube"}

    with pytest.raises(MalformedDescriptorError) as exc_info:
        parse(data)

    assert exc_info.value.missing_fields == ["info.displayName", "modelName"]


def test_missing_display_name_is_reported_with_path():
    data = make_descriptor("shared.link")
    del data["info"]["displayName"]

    with pytest.raises(MalformedDescriptorError) as exc_info:
        parse(data)

    assert exc_info.value.missing_fields == ["info.displayName"]


def test_attributes_must_be_a_mapping():
    with pytest.raises(MalformedDescriptorError) as exc_info:
        parse(make_descriptor("shared.link", attributes=None))

    assert exc_info.value.missing_fields == ["attributes"]


def test_referenced_components_cover_components_and_dynamic_zones():
    descriptor = parse(make_descriptor(
        "block.page",
        attributes={
            "seo": {"type": "component", "component": "shared.seo"},
            "body": {"type": "dynamiczone", "components": ["block.hero", "block.rich-text"]},
            "title": {"type": "string"},
            "self": {"type": "component", "component": "block.page"},
        },
    ))

    assert descriptor.referenced_components() == {"shared.seo", "block.hero", "block.rich-text"}


def test_create_payload_flattens_display_metadata():
    payload = parse(make_descriptor("shared.link")).to_create_payload()

    assert payload == {
        "component": {
            "category": "shared",
            "uid": "shared.link",
            "modelName": "link",
            "displayName": "Link",
            "icon": "cube",
            "attributes": {"title": {"type": "string"}},
        }
    }
