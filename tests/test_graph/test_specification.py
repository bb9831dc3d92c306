"""Tests for specmodel.graph.specification and the resource tree it builds."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

import pytest

from specmodel.exceptions import ResourceNotFoundError, SpecParseError, UnknownMethodError
from specmodel.exit_codes import EXIT_NOT_FOUND, EXIT_UNKNOWN_METHOD
from specmodel.graph import SpecificationModel, load_specification
from specmodel.models import (
    CacheConfig,
    ContractDocument,
    EndpointNode,
    GlobalConfig,
    HTTPMethod,
    OperationNode,
    ValidationConfig,
)


# ---------------------------------------------------------------------------
# Building the resource map
# ---------------------------------------------------------------------------


class TestResources:
    def test_declaration_order(self, orders_model: SpecificationModel) -> None:
        assert list(orders_model.resources) == [
            "/orders",
            "/orders/{orderId}",
            "/orders/{orderId}/items",
            "/{version}/status",
            "/nodes",
        ]
        assert len(orders_model) == 5
        assert [r.uri for r in orders_model] == list(orders_model.resources)

    def test_resources_are_read_only(self, orders_model: SpecificationModel) -> None:
        assert isinstance(orders_model.resources, MappingProxyType)
        with pytest.raises(TypeError):
            orders_model.resources["/x"] = None  # type: ignore[index]

    def test_document_metadata(self, orders_model: SpecificationModel) -> None:
        assert orders_model.title == "Orders API"
        assert orders_model.version == "2.1"
        assert orders_model.base_uri == "https://api.example.com/{version}"
        assert orders_model.document.source_version == "3.0.3"

    def test_get_resource_exact_path_only(self, orders_model: SpecificationModel) -> None:
        assert orders_model.get_resource("/orders") is not None
        assert orders_model.get_resource("/orders/") is None
        assert orders_model.get_resource("/missing") is None

    def test_empty_document(self) -> None:
        model = SpecificationModel(ContractDocument())
        assert len(model) == 0
        assert list(model.iter_actions()) == []


class TestParentLinks:
    def test_top_level_has_no_parent(self, orders_model: SpecificationModel) -> None:
        resource = orders_model.get_resource("/orders")
        assert resource.parent is None
        assert resource.parent_uri == ""
        assert resource.relative_uri == "/orders"

    def test_nested_resource(self, orders_model: SpecificationModel) -> None:
        resource = orders_model.get_resource("/orders/{orderId}")
        assert resource.parent is orders_model.get_resource("/orders")
        assert resource.parent_uri == "/orders"
        assert resource.relative_uri == "/{orderId}"

    def test_closest_declared_ancestor(self, orders_model: SpecificationModel) -> None:
        resource = orders_model.get_resource("/orders/{orderId}/items")
        assert resource.parent_uri == "/orders/{orderId}"
        assert resource.relative_uri == "/items"

    def test_skips_undeclared_intermediate(self) -> None:
        document = ContractDocument(
            endpoints=[EndpointNode(path="/a/b/c"), EndpointNode(path="/a")]
        )
        model = SpecificationModel(document)
        assert model.get_resource("/a/b/c").parent_uri == "/a"
        assert model.get_resource("/a/b/c").relative_uri == "/b/c"

    def test_root_path_is_parent(self) -> None:
        document = ContractDocument(endpoints=[EndpointNode(path="/"), EndpointNode(path="/x")])
        model = SpecificationModel(document)
        assert model.get_resource("/x").parent_uri == "/"
        assert model.get_resource("/x").relative_uri == "/x"
        assert model.get_resource("/").parent is None

    def test_children_not_enumerated(self, orders_model: SpecificationModel) -> None:
        assert len(orders_model.get_resource("/orders").get_resources()) == 0


# ---------------------------------------------------------------------------
# Action lookup
# ---------------------------------------------------------------------------


class TestFindAction:
    def test_case_insensitive(self, orders_model: SpecificationModel) -> None:
        for token in ("post", "POST", "Post", HTTPMethod.POST):
            action = orders_model.find_action("/orders", token)
            assert action.method == HTTPMethod.POST

    def test_same_object_every_time(self, orders_model: SpecificationModel) -> None:
        assert orders_model.find_action("/orders", "get") is orders_model.find_action("/orders", "GET")

    def test_missing_resource(self, orders_model: SpecificationModel) -> None:
        with pytest.raises(ResourceNotFoundError, match="No resource declared at '/nope'") as exc_info:
            orders_model.find_action("/nope", "GET")
        assert exc_info.value.exit_code == EXIT_NOT_FOUND

    def test_undeclared_method(self, orders_model: SpecificationModel) -> None:
        with pytest.raises(ResourceNotFoundError, match="PUT is not declared on '/orders'"):
            orders_model.find_action("/orders", "put")

    def test_unknown_method_token(self, orders_model: SpecificationModel) -> None:
        with pytest.raises(UnknownMethodError) as exc_info:
            orders_model.find_action("/orders", "FETCH")
        assert exc_info.value.method == "FETCH"
        assert exc_info.value.exit_code == EXIT_UNKNOWN_METHOD

    def test_iter_actions_in_order(self, orders_model: SpecificationModel) -> None:
        pairs = [(a.resource.uri, a.method.value) for a in orders_model.iter_actions()]
        assert pairs == [
            ("/orders", "GET"),
            ("/orders", "POST"),
            ("/orders/{orderId}", "GET"),
            ("/orders/{orderId}", "DELETE"),
            ("/orders/{orderId}/items", "GET"),
            ("/{version}/status", "GET"),
            ("/nodes", "POST"),
        ]


# ---------------------------------------------------------------------------
# load_specification
# ---------------------------------------------------------------------------


class TestLoadSpecification:
    def test_from_yaml_file(self, orders_path: Path) -> None:
        model = load_specification(str(orders_path))
        assert model.title == "Orders API"
        assert len(model) == 5

    def test_from_json_file(self) -> None:
        path = Path(__file__).parent.parent / "fixtures" / "minimal.json"
        model = load_specification(str(path))
        assert model.document.source_version == "3.1.0"
        assert model.find_action("/ping", "get").method == HTTPMethod.GET

    def test_version_placeholder_from_config(self, tmp_path: Path) -> None:
        path = tmp_path / "api.yaml"
        path.write_text(
            "openapi: 3.0.0\n"
            "info: {title: T, version: '1'}\n"
            "paths:\n"
            "  /v:ver/items:\n"
            "    get: {responses: {'200': {description: ok}}}\n"
        )
        config = GlobalConfig(
            cache=CacheConfig(enabled=False),
            validation=ValidationConfig(version_placeholder=":ver"),
        )
        model = load_specification(str(path), config=config)
        assert model.get_resource("/v:ver/items").get_resolved_uri("2") == "/v2/items"

    def test_unknown_method_fails_action_map(self) -> None:
        path = Path(__file__).parent.parent / "fixtures" / "unknown_method.yaml"
        model = load_specification(str(path))
        resource = model.get_resource("/things")
        with pytest.raises(UnknownMethodError, match="fetch"):
            _ = resource.actions

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            load_specification(str(tmp_path / "absent.yaml"))

    def test_swagger_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "swagger.json"
        path.write_text('{"swagger": "2.0", "paths": {}}')
        with pytest.raises(SpecParseError, match="Swagger 2.0 is not supported"):
            load_specification(str(path))


class TestManyActions:
    def test_every_declared_method_is_built(self) -> None:
        methods = ["get", "post", "put", "patch", "delete", "head", "options", "trace"]
        document = ContractDocument(
            endpoints=[
                EndpointNode(
                    path="/all",
                    operations=[OperationNode(method=m) for m in methods],
                )
            ]
        )
        resource = SpecificationModel(document).get_resource("/all")
        assert len(resource.actions) == len(methods)
        assert [m.value.lower() for m in resource.actions] == methods

    def test_duplicate_method_last_wins(self) -> None:
        document = ContractDocument(
            endpoints=[
                EndpointNode(
                    path="/dup",
                    operations=[
                        OperationNode(method="get", operation_id="first"),
                        OperationNode(method="post"),
                        OperationNode(method="GET", operation_id="second"),
                    ],
                )
            ]
        )
        actions = SpecificationModel(document).get_resource("/dup").actions
        assert list(actions) == [HTTPMethod.GET, HTTPMethod.POST]
        assert actions[HTTPMethod.GET].operation_id == "second"
