"""Data models for the migrator."""

from .element import (
    ElementType,
    ElementDescriptor,
    ElementOptions,
    NoOptions,
    TextOptions,
    RichTextOptions,
    ChoiceOption,
    MultipleChoiceOptions,
    TaxonomyOptions,
    AssetOptions,
    LinkedItemsOptions,
    ContentGroup,
    ContentTypeInfo,
)
from .mapping import (
    CompatibilityResult,
    FieldMapping,
    MigrationConfig,
)
from .migration import (
    MigrationItem,
    MigrationProgress,
    ItemError,
    ItemResult,
    DryRunField,
    DryRunResult,
    Environment,
    TypeMigrationOptions,
    TypeMigrationConfig,
    TypeMigrationPlan,
    TypeConflict,
    TypeMigrationResult,
    TypeMigrationError,
    TypeMigrationStatus,
    MigrationState,
    MigrationStep,
)

__all__ = [
    "ElementType",
    "ElementDescriptor",
    "ElementOptions",
    "NoOptions",
    "TextOptions",
    "RichTextOptions",
    "ChoiceOption",
    "MultipleChoiceOptions",
    "TaxonomyOptions",
    "AssetOptions",
    "LinkedItemsOptions",
    "ContentGroup",
    "ContentTypeInfo",
    "CompatibilityResult",
    "FieldMapping",
    "MigrationConfig",
    "MigrationItem",
    "MigrationProgress",
    "ItemError",
    "ItemResult",
    "DryRunField",
    "DryRunResult",
    "Environment",
    "TypeMigrationOptions",
    "TypeMigrationConfig",
    "TypeMigrationPlan",
    "TypeConflict",
    "TypeMigrationResult",
    "TypeMigrationError",
    "TypeMigrationStatus",
    "MigrationState",
    "MigrationStep",
]
