"""Field mapping services: compatibility, mapping generation, value transformation."""

from .compatibility import resolve, is_type_compatible, compatible_target_types
from .mapping_generator import generate_mappings, find_best_match, remap
from .transformer import ValueTransformer, transform, has_transform
from .dry_run import DryRunPreview, sample_value

__all__ = [
    "resolve",
    "is_type_compatible",
    "compatible_target_types",
    "generate_mappings",
    "find_best_match",
    "remap",
    "ValueTransformer",
    "transform",
    "has_transform",
    "DryRunPreview",
    "sample_value",
]
