"""Unit tests for the FHIR Questionnaire fragment schemas."""

import pytest
from pydantic import ValidationError

from enablewhen.schemas.fhir import (
    ENABLE_WHEN_URL,
    Extension,
    QuestionnaireItem,
    Questionnaire,
)


class TestExtension:
    """Tests for Extension schema."""

    def test_fragment(self):
        """Test reading the URL fragment."""
        assert Extension(url="#question").fragment == "question"
        assert Extension(url=f"{ENABLE_WHEN_URL}#answer").fragment == "answer"
        assert Extension(url=ENABLE_WHEN_URL).fragment == ""

    def test_camel_case_aliases(self):
        """Test that FHIR property names populate the value fields."""
        ext = Extension.model_validate({
            "url": "#answer",
            "valueCoding": {"system": "http://x", "code": "c1"},
        })
        assert ext.value_coding.code == "c1"
        assert ext.value_boolean is None

    def test_value_boolean_is_strict(self):
        """Test that string flags are not coerced to booleans."""
        with pytest.raises(ValidationError):
            Extension.model_validate({"url": "#answer", "valueBoolean": "true"})

    def test_value_kinds_include_unknown_values(self):
        """Test that unmodelled value[x] properties are reported."""
        ext = Extension.model_validate({"url": "#answer", "valueInteger": 3})
        assert ext.value_kinds() == ["valueInteger"]

        ext = Extension.model_validate({"url": "#answer", "valueBoolean": False})
        assert ext.value_kinds() == ["valueBoolean"]

    def test_numeric_value_string_coerced(self):
        """Test that a numeric question identifier is read as a string."""
        ext = Extension.model_validate({"url": "#question", "valueString": 1.1})
        assert ext.value_string == "1.1"

    def test_sub_extension(self):
        """Test finding nested extensions by fragment."""
        ext = Extension.model_validate({
            "url": ENABLE_WHEN_URL,
            "extension": [
                {"url": "#question", "valueString": "q1"},
                {"url": "#answer", "valueBoolean": True},
            ],
        })
        assert ext.sub_extension("question").value_string == "q1"
        assert ext.sub_extension("answer").value_boolean is True
        assert ext.sub_extension("missing") is None


class TestQuestionnaireItem:
    """Tests for QuestionnaireItem schema."""

    def test_extensions_for_url(self):
        """Test filtering extensions by URL."""
        item = QuestionnaireItem.model_validate({
            "linkId": "q2",
            "extension": [
                {"url": ENABLE_WHEN_URL},
                {"url": "http://example.org/other"},
                {"url": ENABLE_WHEN_URL},
            ],
        })
        assert len(item.extensions_for_url(ENABLE_WHEN_URL)) == 2
        assert item.extensions_for_url("http://example.org/none") is None

    def test_numeric_link_id_coerced(self):
        """Test that numeric linkIds are read as strings."""
        assert QuestionnaireItem.model_validate({"linkId": 2}).link_id == "2"
        assert QuestionnaireItem.model_validate({"linkId": 1.1}).link_id == "1.1"

    def test_describe(self):
        """Test diagnostic descriptions."""
        assert QuestionnaireItem(link_id="q1").describe() == "item 'q1'"
        assert QuestionnaireItem(type="group").describe() == "unidentified group"
        assert str(QuestionnaireItem(link_id="q1")) == "item 'q1'"


class TestQuestionnaire:
    """Tests for Questionnaire schema."""

    def test_nested_items(self):
        """Test parsing nested items."""
        questionnaire = Questionnaire.model_validate({
            "resourceType": "Questionnaire",
            "id": "nested",
            "item": [
                {"linkId": "g1", "type": "group", "item": [{"linkId": "q1", "type": "boolean"}]},
            ],
        })
        assert questionnaire.item[0].item[0].link_id == "q1"

    def test_wrong_resource_type_invalid(self):
        """Test that other resource types are rejected."""
        with pytest.raises(ValidationError):
            Questionnaire.model_validate({"resourceType": "Patient"})
