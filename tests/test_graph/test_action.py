"""Tests for specmodel.graph.action, specmodel.graph.response and specmodel.graph.mime_type."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from specmodel.exceptions import SchemaUnsupportedError, UnknownMethodError
from specmodel.graph import ActionModel, MimeTypeModel, ResourceModel
from specmodel.graph.mime_type import build_body_map
from specmodel.models import (
    EndpointNode,
    HTTPMethod,
    OperationNode,
    ParameterNode,
    PayloadNode,
    ScalarType,
    ValidationIssue,
)
from specmodel.validation import JsonSchemaValidator, Outcome


def _action(operation: OperationNode, validator=None) -> ActionModel:
    validator = validator or JsonSchemaValidator()
    resource = ResourceModel(EndpointNode(path="/x", operations=[operation]), validator)
    return ActionModel(resource, operation, validator)


# ---------------------------------------------------------------------------
# ActionModel
# ---------------------------------------------------------------------------


class TestActionModel:
    def test_method_and_type(self) -> None:
        action = _action(OperationNode(method="patch"))
        assert action.method == HTTPMethod.PATCH
        assert action.type is action.method

    def test_unknown_method(self) -> None:
        with pytest.raises(UnknownMethodError):
            _action(OperationNode(method="brew"))

    def test_metadata(self, orders_model) -> None:
        action = orders_model.find_action("/orders", "get")
        assert action.operation_id == "listOrders"
        assert action.summary == "List orders"
        assert action.description is None

    def test_query_parameters_and_headers(self, orders_model) -> None:
        action = orders_model.find_action("/orders", "get")
        assert list(action.query_parameters) == ["limit", "status"]
        assert action.query_parameters["limit"].type == ScalarType.INTEGER
        assert action.query_parameters["limit"].default == "20"
        assert action.query_parameters["status"].enum_values == ("open", "closed")
        assert list(action.headers) == ["X-Trace-Id"]

    def test_no_request_means_empty_collections(self) -> None:
        operation = OperationNode(
            method="get",
            has_request=False,
            request_payloads=[PayloadNode(media_type="application/json")],
            query_parameters=[ParameterNode(name="q")],
            header_parameters=[ParameterNode(name="h")],
        )
        action = _action(operation)
        assert len(action.bodies) == 0
        assert len(action.query_parameters) == 0
        assert len(action.headers) == 0
        assert not action.has_body()

    def test_bodies(self, orders_model) -> None:
        action = orders_model.find_action("/orders", "post")
        assert action.has_body()
        assert list(action.bodies) == ["application/x-www-form-urlencoded", "application/json"]
        assert action.get_body("application/json").media_type == "application/json"
        assert action.get_body("text/xml") is None

    def test_collections_published_once(self, orders_model) -> None:
        action = orders_model.find_action("/orders", "post")
        assert action.bodies is action.bodies
        assert action.responses is action.responses
        assert action.headers is action.headers

    def test_responses(self, orders_model) -> None:
        action = orders_model.find_action("/orders", "get")
        assert list(action.responses) == ["200", "4XX"]
        assert action.get_response(200) is action.responses["200"]
        assert action.get_response("500") is None


# ---------------------------------------------------------------------------
# ResponseModel
# ---------------------------------------------------------------------------


class TestResponseModel:
    def test_status_code_kept_as_string(self, orders_model) -> None:
        response = orders_model.find_action("/orders", "get").get_response("4XX")
        assert response.status_code == "4XX"
        assert response.description == "Client error"
        assert not response.has_body()

    def test_bodies_and_examples(self, orders_model) -> None:
        response = orders_model.find_action("/orders", "get").get_response("200")
        assert response.has_body()
        assert list(response.bodies) == ["application/json"]
        assert response.get_examples() == {"application/json": [{"id": 1}]}

    def test_headers(self, orders_model) -> None:
        response = orders_model.find_action("/orders", "post").get_response("201")
        assert list(response.headers) == ["Location"]


# ---------------------------------------------------------------------------
# MimeTypeModel
# ---------------------------------------------------------------------------


class TestMimeTypeModel:
    def test_properties(self) -> None:
        payload = PayloadNode(media_type="application/json", schema={"type": "object"}, example={})
        body = MimeTypeModel(payload, JsonSchemaValidator())
        assert body.media_type == "application/json"
        assert body.schema == {"type": "object"}
        assert body.example == {}
        assert body.payload is payload

    def test_validator_receives_handle_and_text(self) -> None:
        validator = MagicMock()
        validator.validate.return_value = [ValidationIssue(message="bad")]
        payload = PayloadNode(media_type="application/json", schema={})
        body = MimeTypeModel(payload, validator)

        result = body.check('{"a": 1}')

        validator.validate.assert_called_once_with(payload, '{"a": 1}')
        assert result.outcome == Outcome.INVALID
        assert body.validate('{"a": 1}') == [ValidationIssue(message="bad")]

    def test_unsupported_is_not_applicable(self) -> None:
        validator = MagicMock()
        validator.validate.side_effect = SchemaUnsupportedError("xml")
        body = MimeTypeModel(PayloadNode(media_type="application/xml"), validator)

        result = body.check("<a/>")

        assert result.outcome == Outcome.NOT_APPLICABLE
        assert result.reason == "xml"
        assert result.ok
        assert body.validate("<a/>") == []

    def test_valid(self, orders_model) -> None:
        body = orders_model.find_action("/orders", "post").get_body("application/json")
        assert body.check('{"id": 7}').outcome == Outcome.VALID
        assert body.validate('{"id": 7}') == []

    def test_form_parameters(self, orders_model) -> None:
        body = orders_model.find_action("/orders", "post").get_body(
            "application/x-www-form-urlencoded"
        )
        params = body.form_parameters
        assert list(params) == ["a", "b"]
        (a,) = params["a"]
        assert a.type == ScalarType.ARRAY
        assert a.is_array()
        assert a.required

    def test_form_parameters_empty_for_json(self, orders_model) -> None:
        body = orders_model.find_action("/orders", "post").get_body("application/json")
        assert len(body.form_parameters) == 0

    def test_duplicate_media_type_last_wins(self) -> None:
        bodies = build_body_map(
            [
                PayloadNode(media_type="application/json", schema={"title": "first"}),
                PayloadNode(media_type="text/plain"),
                PayloadNode(media_type="application/json", schema={"title": "second"}),
            ],
            JsonSchemaValidator(),
        )
        assert list(bodies) == ["application/json", "text/plain"]
        assert bodies["application/json"].schema == {"title": "second"}
