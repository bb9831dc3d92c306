"""Tests for specmodel.validation.body."""

from __future__ import annotations

import logging

import pytest

from specmodel.exceptions import (
    BadRequestError,
    InvalidFormParameterError,
    UnsupportedMediaTypeError,
)
from specmodel.validation import RequestBodyValidator


FORM = "application/x-www-form-urlencoded"


@pytest.fixture
def create_order(orders_model) -> RequestBodyValidator:
    return RequestBodyValidator(orders_model.find_action("/orders", "post"))


class TestFindBody:
    def test_exact_match(self, create_order: RequestBodyValidator) -> None:
        assert create_order.find_body("application/json").media_type == "application/json"

    def test_parameters_and_case_ignored(self, create_order: RequestBodyValidator) -> None:
        body = create_order.find_body("Application/JSON; charset=utf-8")
        assert body is not None
        assert body.media_type == "application/json"

    def test_no_match(self, create_order: RequestBodyValidator) -> None:
        assert create_order.find_body("text/xml") is None


class TestDispatch:
    def test_form_body_is_re_encoded(self, create_order: RequestBodyValidator) -> None:
        assert create_order.validate("a=1&a=2&b=x", FORM) == "a=1&a=2&b=x"

    def test_form_bytes_stay_bytes(self, create_order: RequestBodyValidator) -> None:
        assert create_order.validate(b"a=1&a=2&b=x", FORM) == b"a=1&a=2&b=x"

    def test_form_rejected(self, create_order: RequestBodyValidator) -> None:
        with pytest.raises(InvalidFormParameterError, match="'b' is a required property"):
            create_order.validate("a=1", FORM)

    def test_json_valid(self, create_order: RequestBodyValidator) -> None:
        body = '{"id": 3}'
        assert create_order.validate(body, "application/json") is body

    def test_json_bytes(self, create_order: RequestBodyValidator) -> None:
        assert create_order.validate(b'{"id": 3}', "application/json") == b'{"id": 3}'

    def test_json_rejected(self, create_order: RequestBodyValidator) -> None:
        with pytest.raises(BadRequestError, match="'id' is a required property") as exc_info:
            create_order.validate('{"note": "x"}', "application/json")
        assert not isinstance(exc_info.value, InvalidFormParameterError)

    def test_undeclared_media_type(self, create_order: RequestBodyValidator) -> None:
        with pytest.raises(UnsupportedMediaTypeError, match="text/xml"):
            create_order.validate("<order/>", "text/xml")

    def test_action_without_body_passes_anything(self, orders_model) -> None:
        validator = RequestBodyValidator(orders_model.find_action("/orders", "get"))
        assert validator.validate("whatever", "text/xml") == "whatever"

    def test_unsupported_schema_passes(self, orders_model) -> None:
        validator = RequestBodyValidator(orders_model.find_action("/nodes", "post"))
        assert validator.validate("raw text", "text/plain") == "raw text"
        assert validator.validate("junk=1", FORM) == "junk=1"

    def test_custom_form_media_types(self, orders_model) -> None:
        validator = RequestBodyValidator(
            orders_model.find_action("/orders", "post"),
            form_media_types=["application/json"],
        )
        # Read as a form, the JSON text is a single field named after the whole body.
        with pytest.raises(InvalidFormParameterError):
            validator.validate('{"id": 3}', "application/json")


class TestByteBodies:
    def test_charset_parameter_used(self, create_order: RequestBodyValidator) -> None:
        body = '{"id": 3, "note": "café"}'.encode("latin-1")
        assert create_order.validate(body, "application/json; charset=latin-1") == body

    def test_charset_decoded_body_still_checked(self, create_order: RequestBodyValidator) -> None:
        body = '{"note": "café"}'.encode("latin-1")
        with pytest.raises(BadRequestError, match="'id' is a required property"):
            create_order.validate(body, "application/json; charset=latin-1")

    def test_undecodable_body_passes_through(
        self, create_order: RequestBodyValidator, caplog: pytest.LogCaptureFixture
    ) -> None:
        body = b"\xff\xfe{}"
        with caplog.at_level(logging.WARNING, logger="specmodel.validation.body"):
            assert create_order.validate(body, "application/json") is body
        assert "Cannot validate application/json body" in caplog.text

    def test_unknown_charset_passes_through(
        self, create_order: RequestBodyValidator, caplog: pytest.LogCaptureFixture
    ) -> None:
        body = b'{"note": "x"}'
        with caplog.at_level(logging.WARNING, logger="specmodel.validation.body"):
            assert create_order.validate(body, "application/json; charset=nope") is body
        assert "Cannot validate" in caplog.text
