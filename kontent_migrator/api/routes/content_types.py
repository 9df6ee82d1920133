"""Content type and item listing endpoints."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_config, get_delivery_client, get_management_client
from ..models import ContentTypeListResponse, ContentTypeSummary
from ...clients import DeliveryClient, ManagementClient
from ...config import KontentConfig

router = APIRouter()


@router.get("", response_model=ContentTypeListResponse)
def list_content_types(client: ManagementClient = Depends(get_management_client)):
    """List content types of the configured environment."""
    content_types = [
        ContentTypeSummary(
            id=t.id,
            name=t.name,
            codename=t.codename,
            element_count=len(t.elements),
        )
        for t in client.list_content_types()
    ]
    return ContentTypeListResponse(content_types=content_types, total=len(content_types))


@router.get("/{codename}")
def get_content_type(
    codename: str,
    client: ManagementClient = Depends(get_management_client)
) -> Dict[str, Any]:
    """Get a content type with its elements."""
    return client.get_content_type(codename).to_dict()


@router.get("/{codename}/items")
def list_items(
    codename: str,
    language: Optional[str] = None,
    config: KontentConfig = Depends(get_config),
    delivery: DeliveryClient = Depends(get_delivery_client)
) -> List[Dict[str, Any]]:
    """List items of a content type that exist in the language."""
    items = delivery.list_items(codename, language or config.language)
    return [item.to_dict() for item in items]
