"""Shared fixtures: element definitions, content types and a fake Management API client."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from kontent_migrator.errors import KontentApiError
from kontent_migrator.models.element import (
    ContentTypeInfo,
    ElementDescriptor,
    ElementType,
    MultipleChoiceOptions,
    ChoiceOption,
    TaxonomyOptions,
    TextOptions,
)
from kontent_migrator.models.migration import MigrationItem


def make_element(
    codename: str,
    element_type=ElementType.TEXT,
    name: Optional[str] = None,
    element_id: Optional[str] = None,
    **kwargs
) -> ElementDescriptor:
    return ElementDescriptor(
        id=element_id or f"id-{codename}",
        name=name or codename.replace("_", " ").title(),
        codename=codename,
        type=element_type,
        **kwargs
    )


def choices(*codenames: str) -> MultipleChoiceOptions:
    return MultipleChoiceOptions(choices=tuple(ChoiceOption(codename=c, name=c.title()) for c in codenames))


@pytest.fixture
def source_type() -> ContentTypeInfo:
    return ContentTypeInfo(
        id="type-article",
        name="Article",
        codename="article",
        elements=[
            make_element("title", ElementType.TEXT, name="Title", options=TextOptions(max_length=100)),
            make_element("body", ElementType.RICH_TEXT, name="Body"),
            make_element("rating", ElementType.NUMBER, name="Rating"),
            make_element("published_date", ElementType.DATE_TIME, name="Published Date"),
            make_element("category", ElementType.TAXONOMY, name="Category",
                         options=TaxonomyOptions(group_id="group-1")),
        ],
    )


@pytest.fixture
def target_type() -> ContentTypeInfo:
    return ContentTypeInfo(
        id="type-blog-post",
        name="Blog Post",
        codename="blog_post",
        elements=[
            make_element("title", ElementType.TEXT, name="Title", element_id="t-title",
                         options=TextOptions(max_length=100)),
            make_element("content", ElementType.TEXT, name="Body", element_id="t-content"),
            make_element("score", ElementType.TEXT, name="Rating", element_id="t-score"),
            make_element("publication_date", ElementType.DATE_TIME, name="Publication Date",
                         element_id="t-publication-date"),
            make_element("tags", ElementType.MULTIPLE_CHOICE, name="Tags", element_id="t-tags",
                         options=choices("news")),
        ],
    )


def variant_for(element_values: Dict[str, Any], language_id: str = "lang-default") -> Dict[str, Any]:
    """Language variant JSON with elements referenced by id."""
    return {
        "item": {"id": "item"},
        "language": {"id": language_id},
        "elements": [
            {"element": {"id": element_id}, "value": value}
            for element_id, value in element_values.items()
        ],
    }


class FakeManagementClient:
    """In-memory stand-in for ManagementClient, records every write."""

    def __init__(
        self,
        content_types: Optional[List[ContentTypeInfo]] = None,
        variants: Optional[Dict[str, Dict[str, Any]]] = None,
        connected: bool = True
    ):
        self.content_types = list(content_types or [])
        self.variants = variants or {}
        self.connected = connected
        self.created_items: List[Dict[str, Any]] = []
        self.upserts: List[Dict[str, Any]] = []
        self.added_types: List[ContentTypeInfo] = []
        self.fail_on_add: set = set()

    def test_connection(self) -> bool:
        return self.connected

    def list_content_types(self) -> List[ContentTypeInfo]:
        return list(self.content_types)

    def get_content_type(self, codename: str) -> ContentTypeInfo:
        for content_type in self.content_types:
            if content_type.codename == codename:
                return content_type
        raise KontentApiError("HTTP 404: not found", status_code=404)

    def content_type_exists(self, codename: str) -> bool:
        return any(t.codename == codename for t in self.content_types)

    def add_content_type(self, content_type: ContentTypeInfo, include_content_groups: bool = False):
        if content_type.codename in self.fail_on_add:
            raise KontentApiError("HTTP 400: invalid codename", status_code=400)
        self.added_types.append(content_type)
        self.content_types.append(content_type)
        return content_type

    def get_language_variant(self, item_id: str, language_codename: str = "default") -> Dict[str, Any]:
        variant = self.variants.get(item_id)
        if variant is None:
            raise KontentApiError("HTTP 404: variant not found", status_code=404)
        return variant

    def add_content_item(self, name: str, type_codename: str) -> Dict[str, Any]:
        item = {"id": f"new-{len(self.created_items) + 1}", "name": name, "type": {"codename": type_codename}}
        self.created_items.append(item)
        return item

    def upsert_language_variant(self, item_id: str, language_id: str, elements: List[Dict[str, Any]]):
        self.upserts.append({"item_id": item_id, "language_id": language_id, "elements": elements})
        return {}


@pytest.fixture
def items() -> List[MigrationItem]:
    return [
        MigrationItem(id="item-1", name="First Post", codename="first_post", language="default"),
        MigrationItem(id="item-2", name="Second Post", codename="second_post", language="default"),
    ]


@pytest.fixture
def utc_datetime():
    return datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
