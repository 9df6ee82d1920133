"""Field mapping models for content item migration."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .element import ContentTypeInfo, ElementDescriptor, type_label


@dataclass(frozen=True)
class CompatibilityResult:
    """Verdict of the compatibility resolver for one element pair."""
    is_compatible: bool
    can_transform: bool
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_compatible": self.is_compatible,
            "can_transform": self.can_transform,
            "warnings": list(self.warnings),
        }


@dataclass
class FieldMapping:
    """Pairing of a source element with a target element (or none)."""
    source_field: ElementDescriptor
    target_field: Optional[ElementDescriptor] = None
    is_compatible: bool = False
    transformation_needed: bool = False
    can_transform: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def is_mapped(self) -> bool:
        return self.target_field is not None

    @property
    def hint(self) -> str:
        """One-line human readable summary of the mapping."""
        if not self.target_field:
            return "No target field selected"

        if not self.is_compatible:
            return "Incompatible: " + ("; ".join(self.warnings) or "Incompatible types")

        if self.transformation_needed:
            details = f" ({'; '.join(self.warnings)})" if self.warnings else ""
            return (
                f"Transformation: {type_label(self.source_field.type)} -> "
                f"{type_label(self.target_field.type)}{details}"
            )

        return "Direct mapping possible"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source_field": self.source_field.to_dict(),
            "target_field": self.target_field.to_dict() if self.target_field else None,
            "is_compatible": self.is_compatible,
            "transformation_needed": self.transformation_needed,
            "can_transform": self.can_transform,
            "warnings": list(self.warnings),
        }


@dataclass
class MigrationConfig:
    """Source and target content types with their field mappings."""
    source_content_type: ContentTypeInfo
    target_content_type: ContentTypeInfo
    field_mappings: List[FieldMapping] = field(default_factory=list)
    language: str = "default"

    @classmethod
    def create(
        cls,
        source_content_type: ContentTypeInfo,
        target_content_type: ContentTypeInfo,
        language: str = "default"
    ) -> "MigrationConfig":
        """Build a configuration with generated field mappings."""
        from ..services.mapping_generator import generate_mappings

        return cls(
            source_content_type=source_content_type,
            target_content_type=target_content_type,
            field_mappings=generate_mappings(
                source_content_type.elements,
                target_content_type.elements,
            ),
            language=language,
        )

    def get_mapping(self, source_field_id: str) -> Optional[FieldMapping]:
        for mapping in self.field_mappings:
            if mapping.source_field.id == source_field_id:
                return mapping
        return None

    def update_field_mapping(
        self,
        source_field_id: str,
        target_field_id: Optional[str]
    ) -> Optional[FieldMapping]:
        """
        Point one mapping at another target element and re-resolve it.

        An unknown target id leaves the mapping unmapped. Other mappings are
        not touched.

        Returns:
            The updated mapping, or None when no mapping has that source id
        """
        from ..services.mapping_generator import remap

        mapping = self.get_mapping(source_field_id)
        if mapping is None:
            return None

        target = None
        if target_field_id:
            target = self.target_content_type.get_element_by_id(target_field_id)

        return remap(mapping, target)

    def update_field_mapping_by_codename(
        self,
        source_codename: str,
        target_codename: Optional[str]
    ) -> Optional[FieldMapping]:
        """Same as ``update_field_mapping`` with element codenames."""
        source = self.source_content_type.get_element(source_codename)
        if source is None:
            return None

        target_id = None
        if target_codename:
            target = self.target_content_type.get_element(target_codename)
            target_id = target.id if target else None

        return self.update_field_mapping(source.id, target_id)

    @property
    def valid_mappings(self) -> List[FieldMapping]:
        """Mappings that have a target and passed the compatibility check."""
        return [m for m in self.field_mappings if m.target_field and m.is_compatible]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source_content_type": self.source_content_type.codename,
            "target_content_type": self.target_content_type.codename,
            "language": self.language,
            "field_mappings": [m.to_dict() for m in self.field_mappings],
        }
