"""Field compatibility rules between Kontent.ai element types."""

from typing import Dict, List, Union

from ..models.element import (
    AssetOptions,
    ElementDescriptor,
    ElementType,
    LinkedItemsOptions,
    MultipleChoiceOptions,
    RichTextOptions,
    TaxonomyOptions,
    TextOptions,
    type_value,
)
from ..models.mapping import CompatibilityResult

# Source type -> target types a value can be moved into
COMPATIBILITY: Dict[ElementType, List[ElementType]] = {
    ElementType.TEXT: [ElementType.TEXT, ElementType.RICH_TEXT, ElementType.URL_SLUG],
    ElementType.RICH_TEXT: [ElementType.RICH_TEXT, ElementType.TEXT],
    ElementType.NUMBER: [ElementType.NUMBER, ElementType.TEXT],
    ElementType.MULTIPLE_CHOICE: [ElementType.MULTIPLE_CHOICE, ElementType.TEXT],
    ElementType.DATE_TIME: [ElementType.DATE_TIME, ElementType.TEXT],
    ElementType.ASSET: [ElementType.ASSET],
    ElementType.MODULAR_CONTENT: [ElementType.MODULAR_CONTENT],
    ElementType.TAXONOMY: [ElementType.TAXONOMY, ElementType.MULTIPLE_CHOICE],
    ElementType.URL_SLUG: [ElementType.URL_SLUG, ElementType.TEXT],
    ElementType.CUSTOM: [ElementType.CUSTOM, ElementType.TEXT],
}

# Informational warnings for allowed conversions between different types
CONVERSION_WARNINGS: Dict[tuple, str] = {
    (ElementType.RICH_TEXT, ElementType.TEXT): "Rich text will be converted to plain text (HTML tags removed)",
    (ElementType.TEXT, ElementType.RICH_TEXT): "Text will be wrapped in paragraph tags",
    (ElementType.NUMBER, ElementType.TEXT): "Numbers will be converted to text strings",
    (ElementType.TEXT, ElementType.NUMBER): "Text must contain valid numeric values or will be null",
}

URL_SLUG_WARNING = "Content will be converted to URL-friendly format"
TAXONOMY_TO_CHOICE_WARNING = "Taxonomy terms must be manually mapped to multiple choice options"


def compatible_target_types(source_type: Union[ElementType, str]) -> List[ElementType]:
    """Target types a source element type may be mapped to."""
    return list(COMPATIBILITY.get(source_type, []))


def is_type_compatible(
    source_type: Union[ElementType, str],
    target_type: Union[ElementType, str]
) -> bool:
    return target_type in COMPATIBILITY.get(source_type, [])


def resolve(source: ElementDescriptor, target: ElementDescriptor) -> CompatibilityResult:
    """
    Decide whether values of ``source`` can be written into ``target``.

    Checks the type table first, then constraints of same-type pairs, then
    the conversion between different types. Never raises: every problem is
    reported through the result's flags and warnings.

    Args:
        source: Element of the source content type
        target: Element of the target content type

    Returns:
        CompatibilityResult with the verdict and human readable warnings
    """
    if not is_type_compatible(source.type, target.type):
        return CompatibilityResult(
            is_compatible=False,
            can_transform=False,
            warnings=[
                f"Incompatible types: {type_value(source.type)} "
                f"cannot be converted to {type_value(target.type)}"
            ],
        )

    if source.type == target.type:
        return _resolve_same_type(source, target)

    return _resolve_conversion(source, target)


def _resolve_same_type(source: ElementDescriptor, target: ElementDescriptor) -> CompatibilityResult:
    warnings: List[str] = []

    if target.is_required and not source.is_required:
        warnings.append(f"Target field '{target.name}' is required but source is optional")

    checker = _SAME_TYPE_CHECKS.get(source.type)
    if checker is None:
        return CompatibilityResult(is_compatible=True, can_transform=True, warnings=warnings)

    compatible = checker(source.options, target.options, warnings)
    return CompatibilityResult(is_compatible=compatible, can_transform=compatible, warnings=warnings)


def _resolve_conversion(source: ElementDescriptor, target: ElementDescriptor) -> CompatibilityResult:
    pair = (source.type, target.type)

    if pair == (ElementType.TAXONOMY, ElementType.MULTIPLE_CHOICE):
        return CompatibilityResult(
            is_compatible=False,
            can_transform=False,
            warnings=[TAXONOMY_TO_CHOICE_WARNING],
        )

    if pair in CONVERSION_WARNINGS:
        warnings = [CONVERSION_WARNINGS[pair]]
    elif target.type == ElementType.URL_SLUG:
        warnings = [URL_SLUG_WARNING]
    else:
        warnings = []

    return CompatibilityResult(is_compatible=True, can_transform=True, warnings=warnings)


# Same-type constraint checks. Each appends its warnings and returns the verdict.

def _check_text(source, target, warnings: List[str]) -> bool:
    if not isinstance(source, TextOptions) or not isinstance(target, TextOptions):
        return True
    if source.max_length and target.max_length and target.max_length < source.max_length:
        warnings.append(
            f"Target field has shorter length limit ({target.max_length} vs {source.max_length})"
        )
    return True


def _check_rich_text(source, target, warnings: List[str]) -> bool:
    if not isinstance(source, RichTextOptions) or not isinstance(target, RichTextOptions):
        return True
    if source.allowed_blocks and target.allowed_blocks:
        missing = [b for b in source.allowed_blocks if b not in target.allowed_blocks]
        if missing:
            warnings.append(f"Target field doesn't support these blocks: {', '.join(missing)}")
    return True


def _check_multiple_choice(source, target, warnings: List[str]) -> bool:
    if not isinstance(source, MultipleChoiceOptions) or not isinstance(target, MultipleChoiceOptions):
        return True
    if source.choices is None or target.choices is None:
        return True

    target_codenames = target.codenames
    missing = [c for c in source.codenames if c not in target_codenames]
    if missing:
        warnings.append(f"Target field is missing these options: {', '.join(missing)}")
        return False
    return True


def _check_taxonomy(source, target, warnings: List[str]) -> bool:
    source_group = source.group_id if isinstance(source, TaxonomyOptions) else None
    target_group = target.group_id if isinstance(target, TaxonomyOptions) else None

    if source_group != target_group:
        warnings.append("Different taxonomy groups - manual term mapping required")
        return False
    return True


def _check_asset(source, target, warnings: List[str]) -> bool:
    if not isinstance(source, AssetOptions) or not isinstance(target, AssetOptions):
        return True

    if (
        source.allowed_file_types
        and target.allowed_file_types
        and source.allowed_file_types != target.allowed_file_types
    ):
        warnings.append("Different file type restrictions may cause validation errors")

    if source.max_count and target.max_count and target.max_count < source.max_count:
        warnings.append(f"Target allows fewer assets ({target.max_count} vs {source.max_count})")
    return True


def _check_linked_items(source, target, warnings: List[str]) -> bool:
    if not isinstance(source, LinkedItemsOptions) or not isinstance(target, LinkedItemsOptions):
        return True
    if source.allowed_content_types is None or target.allowed_content_types is None:
        return True

    missing = [t for t in source.allowed_content_types if t not in target.allowed_content_types]
    if missing:
        warnings.append(f"Target doesn't allow these content types: {', '.join(missing)}")
        return False
    return True


_SAME_TYPE_CHECKS = {
    ElementType.TEXT: _check_text,
    ElementType.RICH_TEXT: _check_rich_text,
    ElementType.MULTIPLE_CHOICE: _check_multiple_choice,
    ElementType.TAXONOMY: _check_taxonomy,
    ElementType.ASSET: _check_asset,
    ElementType.MODULAR_CONTENT: _check_linked_items,
}
