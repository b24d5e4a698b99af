"""Unit tests for the dictionary pydantic models."""

import pytest
from pydantic import ValidationError

from apps.api.models.pydantic.common import ErrorResponse
from apps.api.models.pydantic.dictionary import AliasSchema, AliasSchemaEntry, FieldDescriptor, FieldType

pytestmark = pytest.mark.unit


class TestFieldDescriptor:
    def test_defaults(self):
        descriptor = FieldDescriptor(field="z10_cod")
        assert descriptor.field == "Z10_COD"
        assert descriptor.type is FieldType.CHARACTER
        assert descriptor.editable is True
        assert descriptor.enabled is True
        assert descriptor.is_select is False

    @pytest.mark.parametrize("raw,expected", [("N", "N"), ("numeric", "N"), ("Date", "D"), ("logical", "L"), ("memo", "M")])
    def test_type_names(self, raw, expected):
        assert FieldDescriptor(field="A", type=raw).type.value == expected

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            FieldDescriptor(field="A", type="X")

    def test_blank_field_rejected(self):
        with pytest.raises(ValidationError):
            FieldDescriptor(field="")

    def test_options_make_select(self):
        descriptor = FieldDescriptor(field="A", options=[{"value": "S", "label": "Sim"}])
        assert descriptor.is_select is True
        assert descriptor.options[0].value == "S"


class TestAliasSchema:
    def test_duplicate_fields_rejected(self):
        with pytest.raises(ValidationError):
            AliasSchema(description="x", struct=[{"field": "a"}, {"field": "A"}])

    def test_wire_form_omits_unset_bindings(self):
        wire = AliasSchema(description="x", struct=[{"field": "a"}]).to_wire()
        assert wire["struct"][0]["type"] == "C"
        assert "agrup" not in wire["struct"][0]
        assert wire["folders"] == []

    def test_entry_alias_uppercase(self):
        assert AliasSchemaEntry(alias=" z20 ", description="x").alias == "Z20"


class TestErrorResponse:
    def test_detailed_message_defaults_to_message(self):
        body = ErrorResponse(code="X", message="boom").to_body()
        assert body == {"code": "X", "message": "boom", "detailedMessage": "boom"}

    def test_blank_code_rejected(self):
        with pytest.raises(ValidationError):
            ErrorResponse(code="  ", message="boom")
