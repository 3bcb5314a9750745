"""Typed value model and coercion functions for KDL documents.

Key Components:
    Value variants: String, Integer, Float, BigInt, BigFloat, Boolean, Null
    Constructors: new_value, new_integer, new_float, number_from_literal
    Extractors: as_string, as_int64, as_int, as_float64, as_big_integer,
        as_big_float, as_bool, as_null, optional, cast_all
"""

from .coercion import (
    Extractor,
    as_big_float,
    as_big_integer,
    as_bool,
    as_float64,
    as_int,
    as_int64,
    as_null,
    as_string,
    cast_all,
    optional,
)
from .model import (
    INT64_MAX,
    INT64_MIN,
    VALUE_TYPES,
    BigFloat,
    BigInt,
    Boolean,
    Float,
    Integer,
    Null,
    String,
    Value,
    ValueKind,
    format_type_annotation,
    is_value,
    new_float,
    new_integer,
    new_value,
    number_from_literal,
)

__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "VALUE_TYPES",
    "BigFloat",
    "BigInt",
    "Boolean",
    "Extractor",
    "Float",
    "Integer",
    "Null",
    "String",
    "Value",
    "ValueKind",
    "as_big_float",
    "as_big_integer",
    "as_bool",
    "as_float64",
    "as_int",
    "as_int64",
    "as_null",
    "as_string",
    "cast_all",
    "format_type_annotation",
    "is_value",
    "new_float",
    "new_integer",
    "new_value",
    "number_from_literal",
    "optional",
]
