"""Tests for the session web server routes."""

import pytest
from fastapi.testclient import TestClient

from md2pdf.main import build_pipeline
from md2pdf.pagination import StaticLayoutMeasurer
from md2pdf.web_server import Md2PdfWebServer
from fakes import FAKE_PDF, make_measurer_factory

SOURCE = "# Title\n\nBody text.\n"


@pytest.fixture
def pipeline(markdown_file, logger, fake_printer):
    return build_pipeline(
        str(markdown_file(SOURCE)),
        logger,
        measurer_factory=make_measurer_factory(StaticLayoutMeasurer(capacity=1000)),
        printer=fake_printer,
    )


@pytest.fixture
def client(pipeline, logger):
    server = Md2PdfWebServer(pipeline.document, pipeline.preview_service, pipeline.session, logger)
    with TestClient(server.app) as test_client:
        yield test_client


def generate_body(output_path, **overrides):
    body = {
        "outputPath": str(output_path),
        "templateId": "clean",
        "fontId": "default",
        "fontSize": 0,
        "pagesHtml": '<section class="preview-page" data-page="1"></section>',
    }
    body.update(overrides)
    return body


def test_ping(client):
    data = client.get("/ping").json()

    assert data["status"] == "ok"
    assert data["service"] == "md2pdf"
    assert data["session"] == "IDLE"


def test_preview_page_is_served(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert 'id="previewPaper"' in response.text
    assert '<option value="academic">' in response.text
    assert "notes.pdf" in response.text


def test_init_reports_paths_and_options(client, pipeline):
    data = client.get("/api/init").json()

    assert data["inputPath"] == str(pipeline.document.path)
    assert data["inputFileName"] == "notes.md"
    assert data["inputDir"] == str(pipeline.document.base_dir)
    assert data["defaultOutputPath"].endswith("notes.pdf")
    assert [t["template_id"] for t in data["templates"]] == ["clean", "classic", "modern", "academic"]
    assert [f["id"] for f in data["fonts"]] == ["default", "jakarta", "times", "figtree"]
    assert (data["fontSizeMin"], data["fontSizeMax"]) == (12, 24)


def test_markdown_source(client):
    assert client.get("/api/markdown").json() == SOURCE


def test_browse_defaults_to_input_directory(client, pipeline):
    (pipeline.document.base_dir / "old.pdf").write_bytes(b"%PDF")

    data = client.get("/api/browse").json()

    assert data["dir"] == str(pipeline.document.base_dir.resolve())
    assert {"name": "old.pdf", "isDirectory": False} in data["entries"]


def test_preview_returns_paginated_markup(client):
    data = client.post("/api/preview", json={"templateId": "classic", "fontSize": 14}).json()

    assert data["pageCount"] == 1
    assert data["oversizedCount"] == 0
    assert data["pagesHtml"].startswith('<section class="preview-page" data-page="1">')
    assert "<h1>Title</h1>" in data["pagesHtml"]
    assert data["sequence"] == 1


def test_preview_rejects_unknown_template(client):
    response = client.post("/api/preview", json={"templateId": "nope"})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_generate_writes_pdf(client, tmp_path):
    target = tmp_path / "exports" / "result.pdf"

    response = client.post("/api/generate", json=generate_body(target))

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert target.read_bytes() == FAKE_PDF


def test_generate_validation_failure(client, tmp_path):
    data = client.post("/api/generate", json=generate_body("", templateId="nope")).json()

    assert data == {"ok": False, "code": "VALIDATION_ERROR", "reason": "Output path is required."}


def test_generate_overwrite_flow(client, tmp_path):
    target = tmp_path / "exists.pdf"
    target.write_bytes(b"old")

    first = client.post("/api/generate", json=generate_body(target)).json()
    assert first["code"] == "OVERWRITE_REQUIRED"

    second = client.post("/api/generate", json=generate_body(target, forceOverwrite=True)).json()
    assert second == {"ok": True}
    assert target.read_bytes() == FAKE_PDF


def test_generate_after_completion_conflicts(client, tmp_path):
    client.post("/api/generate", json=generate_body(tmp_path / "a.pdf"))

    response = client.post("/api/generate", json=generate_body(tmp_path / "b.pdf"))

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "INVALID_SESSION_STATE"
    assert not (tmp_path / "b.pdf").exists()


def test_cancel_ends_session(client, pipeline, tmp_path):
    assert client.post("/api/cancel").json() == {"ok": True}
    assert client.post("/api/cancel").json() == {"ok": True}

    response = client.post("/api/generate", json=generate_body(tmp_path / "a.pdf"))

    assert response.status_code == 409
    assert pipeline.session.state.value == "CANCELED"


def test_generate_wrongly_typed_fields_report_first_failing_check(client):
    response = client.post(
        "/api/generate",
        json={"outputPath": None, "templateId": 5, "fontSize": None, "pagesHtml": "<p>x</p>"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "ok": False,
        "code": "VALIDATION_ERROR",
        "reason": "Output path is required.",
    }


@pytest.mark.parametrize(
    "overrides, reason",
    [
        ({"templateId": 5}, "Invalid template selected."),
        ({"fontId": None}, "Invalid font selected."),
        ({"fontSize": None}, "Invalid font size."),
        ({"fontSize": "large"}, "Invalid font size."),
        ({"pagesHtml": None}, "Preview pages are empty."),
    ],
)
def test_generate_wrongly_typed_field_reasons(client, tmp_path, overrides, reason):
    data = client.post("/api/generate", json=generate_body(tmp_path / "a.pdf", **overrides)).json()

    assert data == {"ok": False, "code": "VALIDATION_ERROR", "reason": reason}
    assert not (tmp_path / "a.pdf").exists()


def test_generate_accepts_numeric_text_font_size(client, tmp_path):
    target = tmp_path / "a.pdf"

    data = client.post("/api/generate", json=generate_body(target, fontSize="14")).json()

    assert data == {"ok": True}
    assert target.read_bytes() == FAKE_PDF


def test_generate_non_object_body_is_a_validation_failure(client, pipeline):
    response = client.post("/api/generate", json=["not", "an", "object"])

    assert response.status_code == 200
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert pipeline.session.state.value == "REJECTED"


def test_preview_null_font_size_is_rejected(client):
    response = client.post("/api/preview", json={"templateId": "clean", "fontSize": None})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Invalid font size."


def test_preview_non_object_body_is_rejected(client):
    response = client.post("/api/preview", json=[1, 2])

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"
