"""Item migration and content type migration endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import (
    get_config,
    get_delivery_client,
    get_management_client,
    get_type_migrator,
)
from ..models import (
    ItemMigrationRequest,
    TypeMigrationRequest,
    DryRunResponse,
    FieldMappingResponse,
    ItemMigrationResponse,
    TypeMigrationPlanResponse,
    TypeMigrationResponse,
)
from ...clients import DeliveryClient, ManagementClient
from ...config import KontentConfig
from ...executor import ItemMigrationExecutor
from ...models.mapping import MigrationConfig
from ...models.migration import MigrationItem, TypeMigrationConfig, TypeMigrationOptions
from ...services.dry_run import DryRunPreview
from ...type_migrator import ContentTypeMigrator

router = APIRouter()


def _build_migration_config(
    request: ItemMigrationRequest,
    config: KontentConfig,
    client: ManagementClient
) -> MigrationConfig:
    source_type = client.get_content_type(request.source_type)
    target_type = client.get_content_type(request.target_type)

    migration_config = MigrationConfig.create(
        source_type,
        target_type,
        language=request.language or config.language,
    )

    for source_codename, target_codename in request.overrides.items():
        if target_codename and target_type.get_element(target_codename) is None:
            raise HTTPException(status_code=400, detail=f"Unknown target element: {target_codename}")
        if migration_config.update_field_mapping_by_codename(source_codename, target_codename) is None:
            raise HTTPException(status_code=400, detail=f"Unknown source element: {source_codename}")

    return migration_config


def _select_items(
    request: ItemMigrationRequest,
    delivery: DeliveryClient,
    language: str
) -> List[MigrationItem]:
    items = delivery.list_items(request.source_type, language)
    if request.items:
        items = [item for item in items if item.codename in request.items]
    return items


def _type_migration_config(request: TypeMigrationRequest) -> TypeMigrationConfig:
    return TypeMigrationConfig(
        source_environment=request.source_environment.to_environment(),
        target_environment=request.target_environment.to_environment(),
        selected_content_types=request.selected_content_types,
        options=TypeMigrationOptions(
            include_content_groups=request.include_content_groups,
            overwrite_existing=request.overwrite_existing,
            dry_run=request.dry_run,
        ),
    )


@router.post("/preview", response_model=DryRunResponse)
def preview_items(
    request: ItemMigrationRequest,
    config: KontentConfig = Depends(get_config),
    client: ManagementClient = Depends(get_management_client),
    delivery: DeliveryClient = Depends(get_delivery_client)
):
    """Dry run: what the migration would write for each item."""
    migration_config = _build_migration_config(request, config, client)
    items = _select_items(request, delivery, migration_config.language)

    preview = DryRunPreview(client=None if request.sample else client)
    results = preview.preview(migration_config, items)

    return DryRunResponse(
        results=[r.to_dict() for r in results],
        mappings=[FieldMappingResponse.from_mapping(m) for m in migration_config.field_mappings],
    )


@router.post("/items", response_model=ItemMigrationResponse)
def migrate_items(
    request: ItemMigrationRequest,
    config: KontentConfig = Depends(get_config),
    client: ManagementClient = Depends(get_management_client),
    delivery: DeliveryClient = Depends(get_delivery_client)
):
    """
    Migrate items into the target content type.

    Runs synchronously, one item at a time. Failed items are reported in
    the response; the request itself only fails when nothing can be mapped.
    """
    migration_config = _build_migration_config(request, config, client)
    items = _select_items(request, delivery, migration_config.language)

    delay = request.delay_seconds if request.delay_seconds is not None else config.item_delay
    executor = ItemMigrationExecutor(client, delay_seconds=delay)
    progress = executor.execute(migration_config, items)

    data = progress.to_dict()
    return ItemMigrationResponse(
        total=data["total"],
        processed=data["processed"],
        successful=data["successful"],
        failed=data["failed"],
        errors=data["errors"],
        results=data["results"],
        duration_seconds=data["duration_seconds"],
    )


@router.post("/types/compare", response_model=TypeMigrationPlanResponse)
def compare_types(
    request: TypeMigrationRequest,
    migrator: ContentTypeMigrator = Depends(get_type_migrator)
):
    """Compare the selected content types between two environments."""
    plan = migrator.compare(_type_migration_config(request))
    return TypeMigrationPlanResponse(**plan.to_dict())


@router.post("/types", response_model=TypeMigrationResponse)
def migrate_types(
    request: TypeMigrationRequest,
    migrator: ContentTypeMigrator = Depends(get_type_migrator)
):
    """Copy content types into the target environment."""
    result = migrator.migrate(_type_migration_config(request))
    return TypeMigrationResponse(status=migrator.status.to_dict(), **result.to_dict())
