"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..models.element import ElementDescriptor
from ..models.mapping import FieldMapping
from ..models.migration import Environment


# Request Models
class ElementModel(BaseModel):
    """An element definition, in ``to_dict`` form or as Management API JSON."""
    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str
    codename: str
    type: str
    is_required: bool = False
    guidelines: str = ""
    options: Any = None  # Dict in to_dict form, list of choices in API form
    content_group: Any = None

    def to_descriptor(self) -> ElementDescriptor:
        data = self.model_dump()
        if data["options"] is None:
            # Constraints come from the API fields (maximum_text_length, taxonomy_group, ...)
            data.pop("options")
        return ElementDescriptor.from_dict(data)


class GenerateMappingsRequest(BaseModel):
    source_elements: List[ElementModel]
    target_elements: List[ElementModel]


class ResolveRequest(BaseModel):
    source: ElementModel
    target: ElementModel


class TransformRequest(BaseModel):
    value: Any = None
    source_type: str
    target_type: str


class ItemMigrationRequest(BaseModel):
    source_type: str
    target_type: str
    items: List[str] = Field(default_factory=list)  # Item codenames, empty for all
    language: Optional[str] = None
    overrides: Dict[str, Optional[str]] = Field(default_factory=dict)  # source codename -> target codename
    sample: bool = False  # Preview with sample values instead of item data
    delay_seconds: Optional[float] = None


class EnvironmentModel(BaseModel):
    id: str
    api_key: str
    name: str = ""

    def to_environment(self) -> Environment:
        return Environment(id=self.id, api_key=self.api_key, name=self.name)


class TypeMigrationRequest(BaseModel):
    source_environment: EnvironmentModel
    target_environment: EnvironmentModel
    selected_content_types: List[str]
    include_content_groups: bool = False
    overwrite_existing: bool = False
    dry_run: bool = False


# Response Models
class ResolveResponse(BaseModel):
    is_compatible: bool
    can_transform: bool
    transformation_needed: bool
    warnings: List[str] = Field(default_factory=list)


class TransformResponse(BaseModel):
    value: Any = None
    transformation_type: str
    supported: bool


class FieldMappingResponse(BaseModel):
    source_field: Dict[str, Any]
    target_field: Optional[Dict[str, Any]] = None
    is_compatible: bool
    transformation_needed: bool
    can_transform: bool
    warnings: List[str] = Field(default_factory=list)
    hint: str

    @classmethod
    def from_mapping(cls, mapping: FieldMapping) -> "FieldMappingResponse":
        return cls(hint=mapping.hint, **mapping.to_dict())


class MappingListResponse(BaseModel):
    mappings: List[FieldMappingResponse]
    total: int


class ContentTypeSummary(BaseModel):
    id: str
    name: str
    codename: str
    element_count: int


class ContentTypeListResponse(BaseModel):
    content_types: List[ContentTypeSummary]
    total: int


class DryRunResponse(BaseModel):
    results: List[Dict[str, Any]]
    mappings: List[FieldMappingResponse]


class ItemMigrationResponse(BaseModel):
    total: int
    processed: int
    successful: int
    failed: int
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    results: List[Dict[str, Any]] = Field(default_factory=list)
    duration_seconds: Optional[float] = None


class TypeMigrationPlanResponse(BaseModel):
    to_create: List[str]
    to_update: List[str]
    conflicts: List[Dict[str, str]] = Field(default_factory=list)


class TypeMigrationResponse(BaseModel):
    success: bool
    created: List[str] = Field(default_factory=list)
    updated: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    errors: List[Dict[str, str]] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    status: Optional[Dict[str, Any]] = None
