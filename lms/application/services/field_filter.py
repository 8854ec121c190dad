"""Field authorization filter for partial updates.

An allowed shape declares which fields a client may touch, at any depth:
flat fields, nested objects and arrays of objects. filter_fields() prunes an
untrusted payload down to that shape and reports every rejected field in a
single pass, so the caller can answer with one aggregated 400.

Shapes are written once as a small literal DSL (``True`` for a permitted
field, a dict for a nested object, a one-element list holding a dict for an
array of objects) and compiled with shape_from_declaration() into the tagged
variant ``Leaf | ObjectShape | ArrayOf``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, cast

from lms.domain.exceptions import FieldNotAllowedException

# Record id and version counter: never copied, never reported.
IDENTITY_FIELDS: frozenset[str] = frozenset({"id", "version"})


@dataclass(frozen=True)
class Leaf:
    """Permitted field; its value is copied verbatim."""


@dataclass(frozen=True)
class ObjectShape:
    """Permitted nested object with its own allowed fields."""

    fields: Mapping[str, Shape]


@dataclass(frozen=True)
class ArrayOf:
    """Permitted array whose elements are objects of the inner shape."""

    item: ObjectShape


Shape = Leaf | ObjectShape | ArrayOf

LEAF = Leaf()


class EmptyValuePolicy(str, Enum):
    """What to do with a permitted field whose value is None or ""."""

    REJECT = "reject"
    DROP = "drop"


@dataclass
class FilterResult:
    """Permitted subset of the payload plus rejected field names (flattened, by name)."""

    result: dict[str, Any] = field(default_factory=dict)
    rejected: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


def shape_from_declaration(declaration: Any) -> Shape:
    """Compile the literal DSL into a Shape.

    Args:
        declaration: ``True``, a mapping of field name to declaration, a
            one-element list holding a mapping, or an already built Shape.

    Returns:
        The equivalent Shape (nested mappings are read-only).

    Raises:
        ValueError: If any node is not one of the accepted forms.
    """
    if isinstance(declaration, (Leaf, ObjectShape, ArrayOf)):
        return declaration
    if declaration is True:
        return LEAF
    if isinstance(declaration, Mapping):
        return ObjectShape(
            MappingProxyType(
                {str(k): shape_from_declaration(v) for k, v in declaration.items()}
            )
        )
    if isinstance(declaration, (list, tuple)):
        if len(declaration) != 1 or not isinstance(declaration[0], Mapping):
            raise ValueError(
                "Array shape must be a single-element list holding an object shape"
            )
        return ArrayOf(cast(ObjectShape, shape_from_declaration(declaration[0])))
    raise ValueError(f"Unsupported shape declaration: {declaration!r}")


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _filter_object(
    shape: ObjectShape,
    payload: Mapping[str, Any],
    policy: EmptyValuePolicy,
    rejected: list[str],
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in payload.items():
        if key in IDENTITY_FIELDS:
            continue
        entry = shape.fields.get(key)
        if isinstance(entry, ArrayOf) and isinstance(value, list):
            items: list[dict[str, Any]] = []
            bad_element = False
            for element in value:
                if isinstance(element, Mapping):
                    items.append(_filter_object(entry.item, element, policy, rejected))
                else:
                    bad_element = True
            if bad_element:
                rejected.append(key)
            result[key] = items
        elif isinstance(entry, ObjectShape) and isinstance(value, Mapping):
            result[key] = _filter_object(entry, value, policy, rejected)
        elif isinstance(entry, Leaf):
            if not _is_empty(value):
                result[key] = value
            elif policy is EmptyValuePolicy.REJECT:
                rejected.append(key)
        else:
            rejected.append(key)
    return result


def filter_fields(
    shape: ObjectShape | Mapping[str, Any],
    payload: Mapping[str, Any],
    *,
    empty_values: EmptyValuePolicy = EmptyValuePolicy.REJECT,
) -> FilterResult:
    """Prune payload to the allowed shape and collect every rejected field.

    Pure function: neither argument is modified and the result shares no
    containers with the payload except verbatim leaf values.

    Args:
        shape: Compiled ObjectShape, or a DSL mapping compiled on the fly.
        payload: Untrusted client input (JSON-compatible mapping).
        empty_values: REJECT reports permitted fields holding None/"" as
            rejected; DROP leaves them out of the result silently.

    Returns:
        FilterResult with the permitted subset and the rejected names.
    """
    compiled = shape_from_declaration(shape)
    if not isinstance(compiled, ObjectShape):
        raise ValueError("Top-level shape must be an object shape")
    rejected: list[str] = []
    result = _filter_object(compiled, payload, empty_values, rejected)
    return FilterResult(result=result, rejected=rejected)


def filter_or_raise(
    shape: ObjectShape | Mapping[str, Any],
    payload: Mapping[str, Any],
    *,
    empty_values: EmptyValuePolicy = EmptyValuePolicy.REJECT,
) -> dict[str, Any]:
    """Return the permitted subset, or raise FieldNotAllowedException naming all rejected fields."""
    filtered = filter_fields(shape, payload, empty_values=empty_values)
    if filtered.rejected:
        raise FieldNotAllowedException(filtered.rejected)
    return filtered.result


COURSE_UPDATE_SHAPE = shape_from_declaration(
    {
        "name": True,
        "description": True,
        "price": True,
        "estimated_price": True,
        "thumbnail": {"url": True, "public_id": True},
        "tags": True,
        "level": True,
        "demo_url": True,
        "benefits": [{"title": True}],
        "prerequisites": [{"title": True}],
        "course_data": [
            {
                "title": True,
                "video_description": True,
                "video_url": True,
                "video_section": True,
                "video_length": True,
                "video_player": True,
                "links": [{"title": True, "url": True}],
                "suggestion": True,
                "questions": True,
            }
        ],
        "rating": True,
        "purchased": True,
    }
)

USER_UPDATE_SHAPE = shape_from_declaration({"name": True})
