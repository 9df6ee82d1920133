"""Field mapping endpoints: pure computations, no Kontent.ai access."""

from fastapi import APIRouter

from ..models import (
    GenerateMappingsRequest,
    ResolveRequest,
    TransformRequest,
    FieldMappingResponse,
    MappingListResponse,
    ResolveResponse,
    TransformResponse,
)
from ...services.compatibility import resolve
from ...services.mapping_generator import generate_mappings
from ...services.transformer import has_transform, transform, transformation_type

router = APIRouter()


@router.post("/generate", response_model=MappingListResponse)
async def generate(request: GenerateMappingsRequest):
    """Propose a mapping for every source element."""
    mappings = generate_mappings(
        [e.to_descriptor() for e in request.source_elements],
        [e.to_descriptor() for e in request.target_elements],
    )
    return MappingListResponse(
        mappings=[FieldMappingResponse.from_mapping(m) for m in mappings],
        total=len(mappings),
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_pair(request: ResolveRequest):
    """Check one source/target element pair."""
    source = request.source.to_descriptor()
    target = request.target.to_descriptor()
    result = resolve(source, target)
    return ResolveResponse(
        is_compatible=result.is_compatible,
        can_transform=result.can_transform,
        transformation_needed=source.type != target.type,
        warnings=list(result.warnings),
    )


@router.post("/transform", response_model=TransformResponse)
async def transform_value(request: TransformRequest):
    """Convert a single value between element types."""
    return TransformResponse(
        value=transform(request.value, request.source_type, request.target_type),
        transformation_type=transformation_type(request.source_type, request.target_type),
        supported=has_transform(request.source_type, request.target_type),
    )
