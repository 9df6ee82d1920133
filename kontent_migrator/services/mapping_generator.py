"""Automatic pairing of source and target content type elements."""

import logging
from typing import List, Optional, Sequence

from ..models.element import ElementDescriptor
from ..models.mapping import FieldMapping
from .compatibility import resolve

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.5
STEM_LENGTH = 5  # Shared leading characters that make two words related


def generate_mappings(
    sources: Sequence[ElementDescriptor],
    targets: Sequence[ElementDescriptor]
) -> List[FieldMapping]:
    """
    Propose one mapping per source element, in source order.

    A target is chosen by exact codename, then by case-insensitive name,
    then by fuzzy word overlap of the names. Several sources may end up on
    the same target.
    """
    mappings = []

    for source in sources:
        target = _find_by_codename(source, targets)
        if target is None:
            target = _find_by_name(source, targets)
        if target is None:
            target = find_best_match(source, targets)

        if target is None:
            logger.debug(f"No target element found for {source.codename}")
            mappings.append(FieldMapping(
                source_field=source,
                target_field=None,
                is_compatible=False,
                transformation_needed=False,
                can_transform=False,
                warnings=["No matching field found"],
            ))
            continue

        mappings.append(_build_mapping(source, target))

    return mappings


def remap(mapping: FieldMapping, target: Optional[ElementDescriptor]) -> FieldMapping:
    """Point an existing mapping at another target and refresh its verdict."""
    if target is None:
        mapping.target_field = None
        mapping.is_compatible = False
        mapping.can_transform = False
        mapping.transformation_needed = False
        mapping.warnings = ["No target field selected"]
        return mapping

    fresh = _build_mapping(mapping.source_field, target)
    mapping.target_field = fresh.target_field
    mapping.is_compatible = fresh.is_compatible
    mapping.can_transform = fresh.can_transform
    mapping.transformation_needed = fresh.transformation_needed
    mapping.warnings = fresh.warnings
    return mapping


def find_best_match(
    source: ElementDescriptor,
    targets: Sequence[ElementDescriptor]
) -> Optional[ElementDescriptor]:
    """
    Fuzzy match on element names.

    Two words are common when either contains the other or they share a
    stem of at least five leading characters ("published", "publication").
    The score is the number of common source words divided by the longer
    word count. Only a score above 0.5 is accepted; on ties the earliest
    target wins.
    """
    source_words = source.name.lower().split()
    if not source_words:
        return None

    best_match = None
    best_score = 0.0

    for target in targets:
        target_words = target.name.lower().split()
        if not target_words:
            continue
        common = [
            word for word in source_words
            if any(_related(word, t) for t in target_words)
        ]
        score = len(common) / max(len(source_words), len(target_words))

        if score > best_score and score > FUZZY_THRESHOLD:
            best_score = score
            best_match = target

    return best_match


def _related(word: str, other: str) -> bool:
    if word in other or other in word:
        return True
    return len(word) >= STEM_LENGTH and word[:STEM_LENGTH] == other[:STEM_LENGTH]


def _find_by_codename(source, targets) -> Optional[ElementDescriptor]:
    for target in targets:
        if target.codename == source.codename:
            return target
    return None


def _find_by_name(source, targets) -> Optional[ElementDescriptor]:
    name = source.name.lower()
    for target in targets:
        if target.name.lower() == name:
            return target
    return None


def _build_mapping(source: ElementDescriptor, target: ElementDescriptor) -> FieldMapping:
    result = resolve(source, target)
    return FieldMapping(
        source_field=source,
        target_field=target,
        is_compatible=result.is_compatible,
        transformation_needed=source.type != target.type,
        can_transform=result.can_transform,
        warnings=list(result.warnings),
    )
