"""Field authorization filter: allowed shapes, aggregated rejections, purity."""

import copy

import pytest

from lms.application.services.field_filter import (
    COURSE_UPDATE_SHAPE,
    USER_UPDATE_SHAPE,
    ArrayOf,
    EmptyValuePolicy,
    Leaf,
    ObjectShape,
    filter_fields,
    filter_or_raise,
    shape_from_declaration,
)
from lms.domain.exceptions import FieldNotAllowedException


class TestShapeDeclaration:
    def test_compiles_nested_dsl(self) -> None:
        shape = shape_from_declaration(
            {"name": True, "thumbnail": {"url": True}, "links": [{"title": True}]}
        )
        assert isinstance(shape, ObjectShape)
        assert isinstance(shape.fields["name"], Leaf)
        assert isinstance(shape.fields["thumbnail"], ObjectShape)
        assert isinstance(shape.fields["links"], ArrayOf)
        assert isinstance(shape.fields["links"].item.fields["title"], Leaf)

    def test_compiled_shape_is_read_only(self) -> None:
        shape = shape_from_declaration({"name": True})
        with pytest.raises(TypeError):
            shape.fields["role"] = Leaf()  # type: ignore[index]

    def test_already_compiled_shape_is_returned_as_is(self) -> None:
        assert shape_from_declaration(USER_UPDATE_SHAPE) is USER_UPDATE_SHAPE

    @pytest.mark.parametrize(
        "declaration",
        [False, "yes", 1, [True], [{"a": True}, {"b": True}], []],
    )
    def test_invalid_declarations_rejected(self, declaration) -> None:
        with pytest.raises(ValueError):
            shape_from_declaration(declaration)

    def test_top_level_must_be_object(self) -> None:
        with pytest.raises(ValueError, match="object shape"):
            filter_fields(Leaf(), {"name": "x"})  # type: ignore[arg-type]


class TestFilterFields:
    def test_flat_shape_drops_and_reports_unknown_field(self) -> None:
        filtered = filter_fields(
            {"name": True, "price": True}, {"name": "Intro", "price": 10, "hacked": True}
        )
        assert filtered.result == {"name": "Intro", "price": 10}
        assert filtered.rejected == ["hacked"]
        assert not filtered.ok

    def test_empty_payload_is_accepted(self) -> None:
        filtered = filter_fields({"name": True}, {})
        assert filtered.result == {}
        assert filtered.rejected == []
        assert filtered.ok

    def test_identity_fields_are_neither_copied_nor_reported(self) -> None:
        filtered = filter_fields({"name": True}, {"id": "c1", "version": 3, "name": "x"})
        assert filtered.result == {"name": "x"}
        assert filtered.rejected == []

    def test_every_rejected_field_is_collected_in_input_order(self) -> None:
        filtered = filter_fields(USER_UPDATE_SHAPE, {"role": "admin", "name": "A", "email": "e"})
        assert filtered.rejected == ["role", "email"]
        assert filtered.result == {"name": "A"}

    def test_nested_array_rejection_propagates(self) -> None:
        filtered = filter_fields(
            {"course_data": [{"title": True}]},
            {"course_data": [{"title": "x", "video_url": "y"}]},
        )
        assert filtered.rejected == ["video_url"]
        assert filtered.result == {"course_data": [{"title": "x"}]}

    def test_rejections_across_array_elements_are_flattened_by_name(self) -> None:
        filtered = filter_fields(
            {"benefits": [{"title": True}]},
            {"benefits": [{"title": "a", "x": 1}, {"y": 2}, {"x": 3}]},
        )
        assert filtered.rejected == ["x", "y", "x"]
        assert filtered.result == {"benefits": [{"title": "a"}, {}, {}]}

    def test_deeply_nested_links(self) -> None:
        payload = {
            "course_data": [
                {"title": "L1", "links": [{"title": "docs", "url": "u", "tracking": "t"}]}
            ]
        }
        filtered = filter_fields(COURSE_UPDATE_SHAPE, payload)
        assert filtered.rejected == ["tracking"]
        assert filtered.result["course_data"][0]["links"] == [{"title": "docs", "url": "u"}]

    def test_nested_object(self) -> None:
        filtered = filter_fields(
            COURSE_UPDATE_SHAPE,
            {"thumbnail": {"url": "http://x", "public_id": "p", "owner": "me"}},
        )
        assert filtered.result == {"thumbnail": {"url": "http://x", "public_id": "p"}}
        assert filtered.rejected == ["owner"]

    def test_nested_object_with_scalar_value_is_rejected(self) -> None:
        filtered = filter_fields(COURSE_UPDATE_SHAPE, {"thumbnail": "http://x"})
        assert filtered.result == {}
        assert filtered.rejected == ["thumbnail"]

    def test_array_shape_with_non_list_value_is_rejected(self) -> None:
        filtered = filter_fields(COURSE_UPDATE_SHAPE, {"benefits": {"title": "a"}})
        assert filtered.rejected == ["benefits"]
        assert "benefits" not in filtered.result

    def test_non_object_array_elements_reject_the_key_once(self) -> None:
        filtered = filter_fields(COURSE_UPDATE_SHAPE, {"benefits": ["a", {"title": "b"}, 3]})
        assert filtered.rejected == ["benefits"]
        assert filtered.result == {"benefits": [{"title": "b"}]}

    def test_leaf_values_are_copied_verbatim(self) -> None:
        questions = [{"id": "q1", "question": "why?", "answers": []}]
        filtered = filter_fields(
            COURSE_UPDATE_SHAPE, {"course_data": [{"title": "L", "questions": questions}]}
        )
        assert filtered.result["course_data"][0]["questions"] == questions
        assert filtered.ok

    def test_empty_values_rejected_by_default(self) -> None:
        filtered = filter_fields(USER_UPDATE_SHAPE, {"name": ""})
        assert filtered.rejected == ["name"]
        filtered = filter_fields(USER_UPDATE_SHAPE, {"name": None})
        assert filtered.rejected == ["name"]

    def test_empty_values_dropped_when_policy_is_drop(self) -> None:
        filtered = filter_fields(
            {"name": True, "level": True},
            {"name": "", "level": None, "price": 1},
            empty_values=EmptyValuePolicy.DROP,
        )
        assert filtered.result == {}
        assert filtered.rejected == ["price"]

    def test_falsy_non_empty_values_are_kept(self) -> None:
        filtered = filter_fields(COURSE_UPDATE_SHAPE, {"price": 0, "purchased": 0})
        assert filtered.result == {"price": 0, "purchased": 0}
        assert filtered.ok

    def test_payload_is_not_modified(self) -> None:
        payload = {
            "name": "x",
            "bad": 1,
            "course_data": [{"title": "t", "video_url": "v", "links": [{"url": "u"}]}],
        }
        snapshot = copy.deepcopy(payload)
        filtered = filter_fields(COURSE_UPDATE_SHAPE, payload)
        assert payload == snapshot
        filtered.result["course_data"][0]["title"] = "changed"
        assert payload["course_data"][0]["title"] == "t"

    def test_every_present_key_is_either_kept_or_rejected(self) -> None:
        payload = {"id": "c1", "name": "n", "price": 3, "owner": "x", "tags": "a,b"}
        filtered = filter_fields(COURSE_UPDATE_SHAPE, payload)
        kept = set(filtered.result)
        rejected = set(filtered.rejected)
        assert kept.isdisjoint(rejected)
        assert kept | rejected == set(payload) - {"id"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "n", "extra": 1},
            {"course_data": [{"title": "x", "video_url": "v", "hidden": True}]},
            {"benefits": ["bad", {"title": "ok", "z": 1}], "thumbnail": {"url": "u", "q": 1}},
            {},
        ],
    )
    def test_refiltering_the_result_is_a_no_op(self, payload) -> None:
        first = filter_fields(COURSE_UPDATE_SHAPE, payload)
        second = filter_fields(COURSE_UPDATE_SHAPE, first.result)
        assert second.result == first.result
        assert second.rejected == []


class TestFilterOrRaise:
    def test_returns_result_when_clean(self) -> None:
        assert filter_or_raise(USER_UPDATE_SHAPE, {"name": "Grace"}) == {"name": "Grace"}

    def test_raises_with_all_rejected_fields(self) -> None:
        with pytest.raises(FieldNotAllowedException) as exc_info:
            filter_or_raise(COURSE_UPDATE_SHAPE, {"reviews": [], "name": "x", "owner": 1})
        exc = exc_info.value
        assert exc.fields == ["reviews", "owner"]
        assert exc.error_code == "FIELDS_NOT_ALLOWED"
        assert exc.details == {"fields": ["reviews", "owner"]}
        assert "reviews, owner" in exc.message
