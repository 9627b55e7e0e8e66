"""Typed accessors over raw page metadata.

Metadata blocks map lower-cased keys to a string or a list of strings.  These
helpers are the only place where those loose values become booleans, numbers,
enums and string lists; everything downstream works with typed fields.
"""

import math
from typing import Dict, List, Optional, Union

from llm_seo.models.page import RouteGroup, SchemaType

MetaValue = Union[str, List[str]]
MetaBlock = Dict[str, MetaValue]

_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n"}
_GROUPS = ("use-cases", "company", "resources", "content")
_SCHEMA_TYPES = ("software", "article", "product", "webpage")


def as_string(value: Optional[MetaValue]) -> Optional[str]:
    """Return the trimmed string, or *None* for lists and missing values."""
    if not isinstance(value, str):
        return None
    return value.strip()


def as_boolean(value: Optional[MetaValue]) -> Optional[bool]:
    if not value or not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def as_number(value: Optional[MetaValue]) -> Optional[Union[int, float]]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return int(parsed) if parsed.is_integer() else parsed


def as_string_list(value: Optional[MetaValue]) -> Optional[List[str]]:
    """Lists pass through; a string is split on commas."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return None


def normalize_group(value: Optional[MetaValue]) -> RouteGroup:
    normalized = as_string(value)
    if normalized and normalized.lower() in _GROUPS:
        return normalized.lower()  # type: ignore[return-value]
    return "content"


def normalize_schema_type(value: Optional[MetaValue]) -> Optional[SchemaType]:
    normalized = as_string(value)
    if normalized and normalized.lower() in _SCHEMA_TYPES:
        return normalized.lower()  # type: ignore[return-value]
    return None


def normalize_meta(meta: MetaBlock) -> MetaBlock:
    return {key.strip().lower(): value for key, value in meta.items()}
