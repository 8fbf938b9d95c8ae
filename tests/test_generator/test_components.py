"""Tests for specshape.generator.components."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from specshape.exceptions import MissingArgumentError
from specshape.generator.components import build_components_schema, build_components_token


class TestComponentsToken:
    """The flat {kind: {name: schema}} view."""

    def test_kinds_in_document_order(self, petstore: dict[str, Any]) -> None:
        token = build_components_token(petstore)
        assert list(token) == ["schemas", "parameters", "headers", "requestBodies", "responses"]

    def test_unknown_kinds_ignored(self, petstore: dict[str, Any], events: dict[str, Any]) -> None:
        assert "securitySchemes" not in build_components_token(petstore)
        assert list(build_components_token(events)) == ["schemas"]

    def test_schemas_pass_through_as_copies(self, petstore: dict[str, Any]) -> None:
        token = build_components_token(petstore)
        assert token["schemas"]["Pet"] == petstore["components"]["schemas"]["Pet"]
        token["schemas"]["Pet"]["properties"]["extra"] = {}
        assert "extra" not in petstore["components"]["schemas"]["Pet"]["properties"]

    def test_parameter_and_header_schemas(self, petstore: dict[str, Any]) -> None:
        token = build_components_token(petstore)
        assert token["parameters"]["TraceId"] == {"type": "string", "format": "uuid"}
        assert token["headers"]["X-Next"] == {"type": "string"}

    def test_response_has_no_status(self, petstore: dict[str, Any]) -> None:
        error = build_components_token(petstore)["responses"]["Error"]
        (branch,) = error["oneOf"]
        assert "status" not in branch["properties"]
        assert branch["required"] == ["headers", "body"]
        assert branch["properties"]["body"]["required"] == ["code", "message"]

    def test_request_body_branches(self, petstore: dict[str, Any]) -> None:
        new_pet = build_components_token(petstore)["requestBodies"]["NewPet"]
        enums = [
            b["properties"]["headers"]["properties"]["Content-Type"]["enum"]
            for b in new_pet["oneOf"]
        ]
        assert enums == [["application/json"], ["application/x-www-form-urlencoded"]]
        assert all(b["required"] == ["headers", "body"] for b in new_pet["oneOf"])

    def test_optional_request_body(self) -> None:
        document = {
            "components": {
                "requestBodies": {
                    "Patch": {"content": {"application/json": {"schema": {"type": "object"}}}}
                }
            }
        }
        (branch,) = build_components_token(document)["requestBodies"]["Patch"]["oneOf"]
        assert branch["required"] == []
        assert branch["properties"]["body"] == {"type": "object"}

    def test_request_body_without_usable_content(self) -> None:
        document = {"components": {"requestBodies": {"Empty": {"content": {"text/plain": {}}}}}}
        (branch,) = build_components_token(document)["requestBodies"]["Empty"]["oneOf"]
        assert set(branch["properties"]) == {"headers"}

    def test_response_content_branches_independent(self) -> None:
        document = {
            "components": {
                "responses": {
                    "Multi": {
                        "content": {
                            "application/json": {"schema": {"type": "object"}},
                            "text/plain": {"schema": {"type": "string"}},
                        }
                    }
                }
            }
        }
        first, second = build_components_token(document)["responses"]["Multi"]["oneOf"]
        assert first["properties"]["headers"]["properties"]["Content-Type"]["enum"] == [
            "application/json"
        ]
        assert second["properties"]["headers"]["properties"]["Content-Type"]["enum"] == [
            "text/plain"
        ]

    @pytest.mark.parametrize(
        "document",
        [{}, {"components": None}, {"components": {}}, {"components": {"schemas": {}}}],
    )
    def test_empty_schemas_omitted(self, document: dict[str, Any]) -> None:
        assert "schemas" not in build_components_token(document)
        assert "schemas" not in build_components_schema(document)["properties"]

    def test_null_response_member_raises(self) -> None:
        document = {"components": {"responses": {"Gone": None}}}
        with pytest.raises(MissingArgumentError) as exc_info:
            build_components_token(document)
        assert exc_info.value.field == "Gone"

    def test_none_document_raises(self) -> None:
        with pytest.raises(MissingArgumentError):
            build_components_token(None)


class TestComponentsSchema:
    """The nested object view."""

    def test_every_kind_and_member_required(self, petstore: dict[str, Any]) -> None:
        schema = build_components_schema(petstore)
        assert schema["required"] == [
            "schemas",
            "parameters",
            "headers",
            "requestBodies",
            "responses",
        ]
        schemas = schema["properties"]["schemas"]
        assert schemas["required"] == ["Pet", "Error"]
        assert schemas["additionalProperties"] is False
        assert schemas["properties"]["Pet"]["type"] == "object"

    def test_matches_token(self, petstore: dict[str, Any]) -> None:
        token = build_components_token(petstore)
        schema = build_components_schema(petstore)
        for kind, members in token.items():
            assert schema["properties"][kind]["properties"] == members

    def test_does_not_mutate_document(self, petstore: dict[str, Any]) -> None:
        before = copy.deepcopy(petstore)
        build_components_schema(petstore)
        assert petstore == before
