"""Bases: declarative views that filter notes by their properties."""

from vaultgraph.bases.filter import (
    create_context,
    evaluate_expression,
    evaluate_filter,
    evaluate_value,
    filter_notes,
    format_property_value,
    get_property_value,
    query_view,
)
from vaultgraph.bases.parser import (
    combine_filters,
    load_base_file,
    normalize_filter,
    parse_base_file,
    validate_order,
)
from vaultgraph.bases.table import view_table
from vaultgraph.bases.types import (
    And,
    BaseConfig,
    BaseView,
    EvaluationContext,
    FileProperties,
    Filter,
    FilterResult,
    Leaf,
    Not,
    Or,
    PropertyConfig,
    filter_to_raw,
)

__all__ = [
    "And",
    "BaseConfig",
    "BaseView",
    "EvaluationContext",
    "FileProperties",
    "Filter",
    "FilterResult",
    "Leaf",
    "Not",
    "Or",
    "PropertyConfig",
    "combine_filters",
    "create_context",
    "evaluate_expression",
    "evaluate_filter",
    "evaluate_value",
    "filter_notes",
    "filter_to_raw",
    "format_property_value",
    "get_property_value",
    "load_base_file",
    "normalize_filter",
    "parse_base_file",
    "query_view",
    "validate_order",
    "view_table",
]
