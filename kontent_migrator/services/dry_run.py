"""Preview of an item migration without writing anything."""

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence, Union

from ..models.element import ElementType, type_value
from ..models.mapping import MigrationConfig
from ..models.migration import DryRunField, DryRunResult, MigrationItem
from .transformer import ValueTransformer, default_transformer, to_iso_utc, transformation_type

logger = logging.getLogger(__name__)

SAMPLE_NUMBER = 42


def sample_value(element_type: Union[ElementType, str], item_name: str) -> Any:
    """Representative value of an element type, used when no source data is read."""
    kind = type_value(element_type)

    if kind == ElementType.TEXT.value:
        return f"{item_name} - Sample text content"
    if kind == ElementType.RICH_TEXT.value:
        return f"<p><strong>{item_name}</strong></p><p>Rich text content with formatting.</p>"
    if kind == ElementType.NUMBER.value:
        return SAMPLE_NUMBER
    if kind == ElementType.DATE_TIME.value:
        return to_iso_utc(datetime.utcnow())
    if kind == ElementType.URL_SLUG.value:
        return "-".join(item_name.lower().split())
    if kind == ElementType.MULTIPLE_CHOICE.value:
        return [{"codename": "option_1"}, {"codename": "option_2"}]
    if kind == ElementType.ASSET.value:
        return [{"name": "sample-image.jpg", "type": "image/jpeg"}]
    return f"Sample {kind} value"


class DryRunPreview:
    """
    Shows what an item migration would write.

    With a client, values come from each item's source language variant.
    Without one, sample values stand in for them.
    """

    def __init__(self, client=None, transformer: Optional[ValueTransformer] = None):
        self.client = client
        self.transformer = transformer or default_transformer

    def preview(self, config: MigrationConfig, items: Sequence[MigrationItem]) -> List[DryRunResult]:
        return [self.preview_item(config, item) for item in items]

    def preview_item(self, config: MigrationConfig, item: MigrationItem) -> DryRunResult:
        # Local import to avoid a cycle with the executor
        from ..executor import find_variant_value

        result = DryRunResult(item_name=item.name)

        variant = None
        if self.client is not None:
            variant = self.client.get_language_variant(item.id, config.language)

        for mapping in config.valid_mappings:
            source = mapping.source_field
            target = mapping.target_field

            if variant is not None:
                found, source_value = find_variant_value(variant, source)
                if not found:
                    continue
            else:
                source_value = sample_value(source.type, item.name)

            result.transformed_fields.append(DryRunField(
                source_field=source.name,
                source_value=source_value,
                target_field=target.name,
                transformed_value=self.transformer.transform(source_value, source.type, target.type),
                transformation_type=transformation_type(source.type, target.type),
            ))

            result.warnings.extend(f"{source.name}: {warning}" for warning in mapping.warnings)

        logger.debug(f"Dry run for {item.name}: {len(result.transformed_fields)} fields")
        return result
