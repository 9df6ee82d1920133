"""Content item migration between two content types of one environment."""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .errors import KontentApiError, MigrationError
from .models.element import ElementDescriptor, type_value
from .models.mapping import FieldMapping, MigrationConfig
from .models.migration import ItemError, ItemResult, MigrationItem, MigrationProgress
from .services.transformer import ValueTransformer, default_transformer

logger = logging.getLogger(__name__)

DEFAULT_ITEM_DELAY = 0.2  # Seconds between items, keeps clear of API rate limits
MIGRATED_SUFFIX = " (Migrated)"


def find_variant_value(variant: Dict[str, Any], element: ElementDescriptor) -> Tuple[bool, Any]:
    """
    Look up the value of ``element`` in a language variant.

    Variant elements reference their definition by id and sometimes by
    codename; either is accepted.

    Returns:
        (found, value)
    """
    for entry in variant.get("elements") or []:
        ref = entry.get("element") or {}
        if element.id and ref.get("id") == element.id:
            return True, entry.get("value")
        if element.codename and ref.get("codename") == element.codename:
            return True, entry.get("value")
    return False, None


class ItemMigrationExecutor:
    """
    Copies content items into new items of another content type.

    Items are processed one at a time: the source language variant is read,
    a new item is created, mapped values are transformed and the new
    variant is written. A failing item is recorded and the run continues.
    """

    def __init__(
        self,
        client,
        delay_seconds: float = DEFAULT_ITEM_DELAY,
        on_progress: Optional[Callable[[MigrationProgress], None]] = None,
        transformer: Optional[ValueTransformer] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the executor.

        Args:
            client: Management API client (see ManagementClient)
            delay_seconds: Pause after each item
            on_progress: Called with a snapshot after each item
            transformer: Value transformer, the shared default when omitted
            sleep: Sleep function, replaceable in tests
        """
        self.client = client
        self.delay_seconds = delay_seconds
        self.on_progress = on_progress
        self.transformer = transformer or default_transformer
        self._sleep = sleep

    def execute(self, config: MigrationConfig, items: Sequence[MigrationItem]) -> MigrationProgress:
        """
        Migrate the given items with the mappings of ``config``.

        Raises:
            MigrationError: When no mapping has a compatible target
        """
        mappings = config.valid_mappings
        if not mappings:
            raise MigrationError("No valid field mappings found")

        progress = MigrationProgress(total=len(items))
        progress.started_at = datetime.utcnow()

        logger.info(
            f"Migrating {len(items)} items from {config.source_content_type.codename} "
            f"to {config.target_content_type.codename} ({len(mappings)} mapped fields)"
        )

        for item in items:
            try:
                new_item_id, warnings = self.migrate_item(item, config, mappings)
                progress.successful += 1
                message = f"Migrated to {new_item_id}"
                if warnings:
                    message += f" ({'; '.join(warnings)})"
                progress.results.append(ItemResult(
                    item=item, success=True, new_item_id=new_item_id, message=message,
                ))
                logger.info(f"Migrated {item.name} -> {new_item_id}")

            except Exception as e:
                progress.failed += 1
                details = e.to_dict() if isinstance(e, KontentApiError) else None
                progress.errors.append(ItemError(
                    item_id=item.id,
                    item_name=item.name,
                    error=str(e) or "Unknown error",
                    details=details,
                ))
                progress.results.append(ItemResult(item=item, success=False, message=str(e)))
                logger.error(f"Failed to migrate {item.name} ({item.id}): {e}")

            progress.processed += 1

            if self.on_progress:
                self.on_progress(progress.copy())

            if self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        progress.completed_at = datetime.utcnow()
        logger.info(
            f"Item migration finished: {progress.successful} succeeded, {progress.failed} failed"
        )
        return progress

    def migrate_item(
        self,
        item: MigrationItem,
        config: MigrationConfig,
        mappings: List[FieldMapping]
    ) -> Tuple[str, List[str]]:
        """
        Migrate one item.

        Returns:
            Id of the new item and the transformation warnings
        """
        variant = self.client.get_language_variant(item.id, config.language)

        language_id = (variant.get("language") or {}).get("id")
        if not language_id:
            raise MigrationError("Source item language ID is missing")

        new_item = self.client.add_content_item(
            f"{item.name}{MIGRATED_SUFFIX}",
            config.target_content_type.codename,
        )

        elements, warnings = self.build_elements(variant, mappings)

        self.client.upsert_language_variant(new_item["id"], language_id, elements)
        return new_item["id"], warnings

    def build_elements(
        self,
        variant: Dict[str, Any],
        mappings: List[FieldMapping]
    ) -> Tuple[List[Dict[str, Any]], List[str]]:
        """
        Transform the mapped values of a source variant into target elements.

        Mappings without a target or that cannot be transformed are skipped,
        as are source elements missing from the variant.
        """
        elements = []
        warnings = []

        for mapping in mappings:
            if not mapping.target_field or not mapping.can_transform:
                continue

            found, value = find_variant_value(variant, mapping.source_field)
            if not found:
                continue

            source_type = mapping.source_field.type
            target_type = mapping.target_field.type
            if not self.transformer.has_transform(source_type, target_type):
                warnings.append(
                    f"No transformation available from {type_value(source_type)} "
                    f"to {type_value(target_type)}"
                )
                continue

            elements.append({
                "element": {"codename": mapping.target_field.codename},
                "value": self.transformer.transform(value, source_type, target_type),
            })

        return elements, warnings
