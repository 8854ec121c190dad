"""Application services: field authorization filter and cache invalidation policy."""

from lms.application.services.cache_policy import (
    INVALIDATION_TABLE,
    CacheInvalidator,
    InvalidationRule,
    InvalidationScope,
    Mutation,
    OwnKey,
    invalidation_scope,
    read_through,
)
from lms.application.services.field_filter import (
    COURSE_UPDATE_SHAPE,
    USER_UPDATE_SHAPE,
    EmptyValuePolicy,
    FilterResult,
    filter_fields,
    filter_or_raise,
    shape_from_declaration,
)

__all__ = [
    "COURSE_UPDATE_SHAPE",
    "INVALIDATION_TABLE",
    "USER_UPDATE_SHAPE",
    "CacheInvalidator",
    "EmptyValuePolicy",
    "FilterResult",
    "InvalidationRule",
    "InvalidationScope",
    "Mutation",
    "OwnKey",
    "filter_fields",
    "filter_or_raise",
    "invalidation_scope",
    "read_through",
]
