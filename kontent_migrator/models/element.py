"""Content type and element models built from Management API responses."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from dateutil import parser as date_parser


class ElementType(str, Enum):
    """Element types the migrator understands."""
    TEXT = "text"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    DATE_TIME = "date_time"
    MULTIPLE_CHOICE = "multiple_choice"
    ASSET = "asset"
    MODULAR_CONTENT = "modular_content"  # Linked items
    TAXONOMY = "taxonomy"
    URL_SLUG = "url_slug"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return ELEMENT_TYPE_LABELS[self]


ELEMENT_TYPE_LABELS: Dict[ElementType, str] = {
    ElementType.TEXT: "Text",
    ElementType.RICH_TEXT: "Rich Text",
    ElementType.NUMBER: "Number",
    ElementType.MULTIPLE_CHOICE: "Multiple Choice",
    ElementType.DATE_TIME: "Date & Time",
    ElementType.ASSET: "Asset",
    ElementType.MODULAR_CONTENT: "Linked Items",
    ElementType.TAXONOMY: "Taxonomy",
    ElementType.URL_SLUG: "URL Slug",
    ElementType.CUSTOM: "Custom Element",
}


def parse_element_type(value: Any) -> Union[ElementType, str]:
    """Return the matching ElementType, or the raw string for unknown types."""
    if isinstance(value, ElementType):
        return value
    try:
        return ElementType(value)
    except ValueError:
        return str(value or "")


def type_value(element_type: Union[ElementType, str]) -> str:
    """Raw API string of an element type."""
    if isinstance(element_type, ElementType):
        return element_type.value
    return str(element_type)


def type_label(element_type: Union[ElementType, str]) -> str:
    if isinstance(element_type, ElementType):
        return element_type.label
    return str(element_type)


# Element options: one variant per element type.

@dataclass(frozen=True)
class NoOptions:
    """Element types without migration-relevant constraints."""

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class TextOptions:
    max_length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"max_length": self.max_length}

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "TextOptions":
        limit = element.get("maximum_text_length") or {}
        return cls(max_length=limit.get("value"))


@dataclass(frozen=True)
class RichTextOptions:
    allowed_blocks: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed_blocks": list(self.allowed_blocks) if self.allowed_blocks is not None else None}

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "RichTextOptions":
        blocks = element.get("allowed_blocks")
        return cls(allowed_blocks=tuple(blocks) if blocks is not None else None)


@dataclass(frozen=True)
class ChoiceOption:
    """A single option of a multiple choice element."""
    codename: str
    name: str = ""
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "codename": self.codename}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChoiceOption":
        return cls(
            codename=data.get("codename", ""),
            name=data.get("name", ""),
            id=data.get("id", ""),
        )


@dataclass(frozen=True)
class MultipleChoiceOptions:
    choices: Optional[Tuple[ChoiceOption, ...]] = None
    mode: str = "multiple"  # "single" or "multiple"

    @property
    def codenames(self) -> List[str]:
        return [choice.codename for choice in self.choices or ()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "choices": [c.to_dict() for c in self.choices] if self.choices is not None else None,
            "mode": self.mode,
        }

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "MultipleChoiceOptions":
        options = element.get("options")
        choices = None
        if options is not None:
            choices = tuple(ChoiceOption.from_dict(opt) for opt in options)
        return cls(choices=choices, mode=element.get("mode", "multiple"))


@dataclass(frozen=True)
class TaxonomyOptions:
    group_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"group_id": self.group_id}

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "TaxonomyOptions":
        group = element.get("taxonomy_group") or {}
        return cls(group_id=group.get("id") or group.get("codename"))


@dataclass(frozen=True)
class AssetOptions:
    allowed_file_types: Optional[str] = None  # "any" or "adjustable"
    max_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed_file_types": self.allowed_file_types, "max_count": self.max_count}

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "AssetOptions":
        limit = element.get("asset_count_limit") or {}
        return cls(
            allowed_file_types=element.get("allowed_file_types"),
            max_count=limit.get("value"),
        )


@dataclass(frozen=True)
class LinkedItemsOptions:
    allowed_content_types: Optional[Tuple[str, ...]] = None  # Codenames, or ids when no codename

    def to_dict(self) -> Dict[str, Any]:
        types = self.allowed_content_types
        return {"allowed_content_types": list(types) if types is not None else None}

    @classmethod
    def from_api(cls, element: Dict[str, Any]) -> "LinkedItemsOptions":
        allowed = element.get("allowed_content_types")
        if allowed is None:
            return cls()
        refs = []
        for ref in allowed:
            if isinstance(ref, dict):
                refs.append(ref.get("codename") or ref.get("id", ""))
            else:
                refs.append(str(ref))
        return cls(allowed_content_types=tuple(refs))


ElementOptions = Union[
    NoOptions,
    TextOptions,
    RichTextOptions,
    MultipleChoiceOptions,
    TaxonomyOptions,
    AssetOptions,
    LinkedItemsOptions,
]

OPTIONS_BY_TYPE = {
    ElementType.TEXT: TextOptions,
    ElementType.RICH_TEXT: RichTextOptions,
    ElementType.MULTIPLE_CHOICE: MultipleChoiceOptions,
    ElementType.TAXONOMY: TaxonomyOptions,
    ElementType.ASSET: AssetOptions,
    ElementType.MODULAR_CONTENT: LinkedItemsOptions,
}


def options_from_api(element_type: Union[ElementType, str], element: Dict[str, Any]) -> ElementOptions:
    """Build the options variant for an element from its API representation."""
    options_cls = OPTIONS_BY_TYPE.get(element_type)
    if options_cls is None:
        return NoOptions()
    return options_cls.from_api(element)


def options_from_dict(element_type: Union[ElementType, str], data: Dict[str, Any]) -> ElementOptions:
    """Build the options variant from its ``to_dict`` representation."""
    if element_type == ElementType.TEXT:
        return TextOptions(max_length=data.get("max_length"))
    if element_type == ElementType.RICH_TEXT:
        blocks = data.get("allowed_blocks")
        return RichTextOptions(allowed_blocks=tuple(blocks) if blocks is not None else None)
    if element_type == ElementType.MULTIPLE_CHOICE:
        choices = data.get("choices")
        return MultipleChoiceOptions(
            choices=tuple(ChoiceOption.from_dict(c) for c in choices) if choices is not None else None,
            mode=data.get("mode", "multiple"),
        )
    if element_type == ElementType.TAXONOMY:
        return TaxonomyOptions(group_id=data.get("group_id"))
    if element_type == ElementType.ASSET:
        return AssetOptions(
            allowed_file_types=data.get("allowed_file_types"),
            max_count=data.get("max_count"),
        )
    if element_type == ElementType.MODULAR_CONTENT:
        types = data.get("allowed_content_types")
        return LinkedItemsOptions(allowed_content_types=tuple(types) if types is not None else None)
    return NoOptions()


@dataclass(frozen=True)
class ElementDescriptor:
    """Definition of one element (field) of a content type."""
    id: str
    name: str
    codename: str
    type: Union[ElementType, str]
    is_required: bool = False
    guidelines: str = ""
    options: ElementOptions = field(default_factory=NoOptions)
    content_group: Optional[str] = None  # Content group id

    @property
    def type_label(self) -> str:
        return type_label(self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "type": type_value(self.type),
            "is_required": self.is_required,
            "options": self.options.to_dict(),
        }
        if self.guidelines:
            result["guidelines"] = self.guidelines
        if self.content_group:
            result["content_group"] = self.content_group
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElementDescriptor":
        """
        Create from a dictionary.

        Accepts both the ``to_dict`` form (``options`` is a mapping) and the
        raw Management API element JSON.
        """
        element_type = parse_element_type(data.get("type", ""))
        raw_options = data.get("options")

        if isinstance(raw_options, dict):
            options = options_from_dict(element_type, raw_options)
        else:
            options = options_from_api(element_type, data)

        group = data.get("content_group")
        if isinstance(group, dict):
            group = group.get("id") or group.get("codename")

        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            codename=data.get("codename") or "",
            type=element_type,
            is_required=bool(data.get("is_required", data.get("isRequired", False))),
            guidelines=data.get("guidelines") or "",
            options=options,
            content_group=group,
        )

    from_api = from_dict

    def to_api_payload(self, group_codename: Optional[str] = None) -> Dict[str, Any]:
        """Element definition for the Management API add content type call."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "codename": self.codename,
            "type": type_value(self.type),
        }
        if self.type != ElementType.CUSTOM:
            payload["is_required"] = self.is_required
        if self.guidelines:
            payload["guidelines"] = self.guidelines

        options = self.options
        if isinstance(options, MultipleChoiceOptions):
            payload["mode"] = options.mode
            payload["options"] = [
                {"name": c.name or c.codename, "codename": c.codename}
                for c in options.choices or ()
            ]
        elif isinstance(options, TaxonomyOptions) and options.group_id:
            payload["taxonomy_group"] = {"id": options.group_id}
        elif isinstance(options, TextOptions) and options.max_length:
            payload["maximum_text_length"] = {"value": options.max_length, "applies_to": "characters"}
        elif isinstance(options, AssetOptions):
            if options.allowed_file_types:
                payload["allowed_file_types"] = options.allowed_file_types
            if options.max_count:
                payload["asset_count_limit"] = {"value": options.max_count, "condition": "at_most"}
        elif isinstance(options, LinkedItemsOptions) and options.allowed_content_types:
            payload["allowed_content_types"] = [
                {"codename": codename} for codename in options.allowed_content_types
            ]

        if group_codename:
            payload["content_group"] = {"codename": group_codename}
        return payload


@dataclass(frozen=True)
class ContentGroup:
    id: str
    name: str
    codename: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "codename": self.codename}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentGroup":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            codename=data.get("codename") or "",
        )


@dataclass
class ContentTypeInfo:
    """A content type and its element definitions."""
    id: str
    name: str
    codename: str
    elements: List[ElementDescriptor] = field(default_factory=list)
    content_groups: List[ContentGroup] = field(default_factory=list)
    last_modified: Optional[datetime] = None

    def get_element(self, codename: str) -> Optional[ElementDescriptor]:
        """Get an element by codename."""
        for element in self.elements:
            if element.codename == codename:
                return element
        return None

    def get_element_by_id(self, element_id: str) -> Optional[ElementDescriptor]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "elements": [e.to_dict() for e in self.elements],
            "content_groups": [g.to_dict() for g in self.content_groups],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentTypeInfo":
        """Create from a Management API content type or a ``to_dict`` result."""
        last_modified = data.get("last_modified")
        if isinstance(last_modified, str) and last_modified:
            last_modified = date_parser.isoparse(last_modified)
        elif not isinstance(last_modified, datetime):
            last_modified = None

        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            codename=data.get("codename") or "",
            elements=[ElementDescriptor.from_dict(e) for e in data.get("elements") or []],
            content_groups=[ContentGroup.from_dict(g) for g in data.get("content_groups") or []],
            last_modified=last_modified,
        )

    from_api = from_dict

    def to_api_payload(self, include_content_groups: bool = False) -> Dict[str, Any]:
        """Body of the Management API add content type call."""
        payload: Dict[str, Any] = {"name": self.name, "codename": self.codename}
        groups = {g.id: g.codename for g in self.content_groups}

        if include_content_groups and self.content_groups:
            payload["content_groups"] = [
                {"name": g.name, "codename": g.codename} for g in self.content_groups
            ]
            payload["elements"] = [
                e.to_api_payload(group_codename=groups.get(e.content_group))
                for e in self.elements
            ]
        else:
            payload["elements"] = [e.to_api_payload() for e in self.elements]
        return payload
