"""Tests for ordered validation of generation requests."""

import pytest

from md2pdf.exceptions import ValidationError
from md2pdf.validation.models import GenerateRequest
from md2pdf.validation.validator import GenerateRequestValidator

PAGES = '<section class="preview-page" data-page="1"></section>'


@pytest.fixture
def validator() -> GenerateRequestValidator:
    return GenerateRequestValidator(font_size_bounds=(12, 24))


def make_request(**overrides) -> GenerateRequest:
    fields = dict(
        output_path="/tmp/out/report",
        template_id="clean",
        font_id="default",
        font_size=0,
        pages_html=PAGES,
    )
    fields.update(overrides)
    return GenerateRequest(**fields)


def test_valid_request_normalises_output_path(validator):
    validated = validator.validate(make_request())

    assert validated.output_path == "/tmp/out/report.pdf"
    assert validated.template_id == "clean"
    assert validated.force_overwrite is False


def test_missing_output_path_wins_over_other_failures(validator):
    request = make_request(output_path="   ", template_id="nope", font_id="comic", font_size=99)

    with pytest.raises(ValidationError) as exc_info:
        validator.validate(request)

    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.message == "Output path is required."


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"template_id": "nope", "font_id": "comic"}, "Invalid template selected."),
        ({"font_id": "comic", "font_size": 99}, "Invalid font selected."),
        ({"font_size": 99, "pages_html": ""}, "Invalid font size."),
        ({"font_size": 11}, "Invalid font size."),
        ({"pages_html": ""}, "Preview pages are empty."),
    ],
)
def test_first_failing_check_decides_reason(validator, overrides, message):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(make_request(**overrides))

    assert exc_info.value.message == message


@pytest.mark.parametrize("size", [0, 12, 18, 24])
def test_font_size_bounds_are_inclusive(validator, size):
    assert validator.is_valid_font_size(size)


@pytest.mark.parametrize("size", [-1, 1, 11, 25])
def test_font_size_outside_bounds_rejected(validator, size):
    assert not validator.is_valid_font_size(size)


def test_request_accepts_camel_case_wire_fields():
    request = GenerateRequest.model_validate(
        {
            "outputPath": "a.pdf",
            "templateId": "modern",
            "fontId": "times",
            "fontSize": 14,
            "pagesHtml": PAGES,
            "forceOverwrite": True,
        }
    )

    assert request.template_id == "modern"
    assert request.force_overwrite is True


def test_loose_wire_values_are_coerced():
    request = GenerateRequest.model_validate(
        {"outputPath": None, "templateId": 5, "fontSize": "16", "forceOverwrite": "true"}
    )

    assert request.output_path == ""
    assert request.template_id == "5"
    assert request.font_size == 16
    assert request.force_overwrite is True


@pytest.mark.parametrize(
    "raw, expected",
    [(None, None), ("abc", None), (14.0, 14), (14.5, None), (True, None), (" 18 ", 18)],
)
def test_font_size_coercion(raw, expected):
    assert GenerateRequest.model_validate({"fontSize": raw}).font_size == expected


def test_unreadable_font_size_fails_font_size_check(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(GenerateRequest.model_validate({
            "outputPath": "/tmp/out.pdf",
            "templateId": "clean",
            "fontId": "default",
            "fontSize": None,
            "pagesHtml": PAGES,
        }))

    assert exc_info.value.message == "Invalid font size."
