"""Value transformation between Kontent.ai element types."""

import re
import logging
from typing import Any, Callable, Dict, Optional, Union
from datetime import datetime, timezone
from dateutil import parser as date_parser

from ..models.element import ElementType, type_value

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]*>")
NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")
SLUG_MAX_LENGTH = 50
# Two defaults differing in year, month and day
PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

TypeRef = Union[ElementType, str]
Transform = Callable[[Any, str], Any]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def strip_tags(html: str) -> str:
    """Remove every ``<...>`` sequence and trim."""
    return TAG_PATTERN.sub("", str(html)).strip()


def parse_number(text: Any) -> Optional[float]:
    """Parse the leading numeric literal of a string ("12.5kg" -> 12.5)."""
    match = NUMBER_PREFIX.match(str(text))
    if not match:
        return None
    return float(match.group(0))


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_iso_utc(dt: datetime) -> str:
    """ISO 8601 in UTC with milliseconds, e.g. ``2024-01-15T10:30:00.000Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a date string, epoch milliseconds or datetime. None if invalid.

    Strings must name a full calendar date. dateutil fills missing parts
    from its default, so a string parsed to different results under two
    defaults is incomplete ("12", "March", "10:30") and rejected.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value)
    try:
        first = date_parser.parse(text, default=PARSE_DEFAULTS[0])
        second = date_parser.parse(text, default=PARSE_DEFAULTS[1])
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first


class ValueTransformer:
    """
    Converts element values from one element type to another.

    Transforms are registered per target type and receive the value and the
    raw source type. A transform registered with ``register_transform``
    takes precedence over the built-in one for that target.

    Every call is total: unparseable input gives None (or an empty value of
    the target's shape) instead of raising.
    """

    def __init__(self):
        """Initialize the transformer."""
        self._custom_transforms: Dict[str, Transform] = {}
        self._builtin_transforms = self._register_builtin_transforms()

    def _register_builtin_transforms(self) -> Dict[str, Transform]:
        """Register all built-in transformation functions."""
        return {
            ElementType.TEXT.value: self._to_text,
            ElementType.RICH_TEXT.value: self._to_rich_text,
            ElementType.NUMBER.value: self._to_number,
            ElementType.DATE_TIME.value: self._to_date_time,
            ElementType.MULTIPLE_CHOICE.value: self._to_multiple_choice,
            ElementType.URL_SLUG.value: self._to_url_slug,
        }

    def register_transform(self, target_type: TypeRef, func: Transform) -> None:
        """Register a custom transformation into ``target_type``."""
        self._custom_transforms[type_value(target_type)] = func

    def _get_transform(self, target_type: str) -> Optional[Transform]:
        return (
            self._custom_transforms.get(target_type) or
            self._builtin_transforms.get(target_type)
        )

    def has_transform(self, source_type: TypeRef, target_type: TypeRef) -> bool:
        """Whether a value can be carried from ``source_type`` to ``target_type``."""
        target = type_value(target_type)
        return type_value(source_type) == target or self._get_transform(target) is not None

    def transform(self, value: Any, source_type: TypeRef, target_type: TypeRef) -> Any:
        """
        Convert ``value`` of a ``source_type`` element for a ``target_type`` element.

        Args:
            value: Element value as returned by the Management API
            source_type: Type of the source element
            target_type: Type of the target element

        Returns:
            The converted value, or None when no conversion exists
        """
        source = type_value(source_type)
        target = type_value(target_type)

        if source == target:
            return value

        transform_func = self._get_transform(target)
        if not transform_func:
            logger.warning(f"No transformation available from {source} to {target}")
            return None

        try:
            return transform_func(value, source)
        except Exception as e:
            logger.warning(f"Transform error from {source} to {target}: {e}")
            return None

    # Built-in transform functions

    def _to_text(self, value: Any, source_type: str) -> str:
        """Plain text form of a value."""
        if _is_empty(value):
            return ""

        if source_type == ElementType.RICH_TEXT.value:
            return strip_tags(value)
        if source_type == ElementType.NUMBER.value:
            return format_number(value)
        if source_type == ElementType.DATE_TIME.value:
            parsed = parse_datetime(value)
            return to_iso_utc(parsed) if parsed else str(value)
        if source_type in (ElementType.MULTIPLE_CHOICE.value, ElementType.TAXONOMY.value):
            if isinstance(value, list):
                return ", ".join(_member_label(member) for member in value)
            return _member_label(value)
        return str(value)

    def _to_rich_text(self, value: Any, source_type: str) -> str:
        """Wrap a value in a paragraph."""
        if _is_empty(value):
            return "<p></p>"
        if source_type == ElementType.NUMBER.value:
            return f"<p>{format_number(value)}</p>"
        return f"<p>{value}</p>"

    def _to_number(self, value: Any, source_type: str) -> Optional[float]:
        """Parse a number. None if not numeric."""
        if _is_empty(value):
            return None

        if source_type == ElementType.TEXT.value:
            return parse_number(value)
        if source_type == ElementType.RICH_TEXT.value:
            return parse_number(strip_tags(value))

        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def _to_date_time(self, value: Any, source_type: str) -> Optional[str]:
        """Parse a date. Numbers are epoch milliseconds."""
        if _is_empty(value):
            return None
        parsed = parse_datetime(value)
        return to_iso_utc(parsed) if parsed else None

    def _to_multiple_choice(self, value: Any, source_type: str) -> list:
        """Options cannot be inferred from other types."""
        logger.warning("Multiple choice transformation requires manual option mapping")
        return []

    def _to_url_slug(self, value: Any, source_type: str) -> str:
        """URL friendly form of the value's text."""
        if _is_empty(value):
            return ""
        text = self._to_text(value, source_type).lower()
        slug = SLUG_SEPARATOR.sub("-", text).strip("-")
        return slug[:SLUG_MAX_LENGTH]


def _member_label(member: Any) -> str:
    if isinstance(member, dict):
        return member.get("name") or member.get("codename") or ""
    return str(member)


def transformation_type(source_type: TypeRef, target_type: TypeRef) -> str:
    """``direct`` for equal types, ``source -> target`` otherwise."""
    source = type_value(source_type)
    target = type_value(target_type)
    if source == target:
        return "direct"
    return f"{source} -> {target}"


default_transformer = ValueTransformer()


def transform(value: Any, source_type: TypeRef, target_type: TypeRef) -> Any:
    """Transform with the shared default transformer."""
    return default_transformer.transform(value, source_type, target_type)


def has_transform(source_type: TypeRef, target_type: TypeRef) -> bool:
    return default_transformer.has_transform(source_type, target_type)
