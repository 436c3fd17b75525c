import io

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bulk_feedback.middleware.limits import BodySizeLimitMiddleware

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_supported_types(client):
    r = client.get("/supported-types")
    assert r.status_code == 200
    payload = r.json()
    assert "essay" in payload["assignmentTypes"]
    assert payload["fileExtensions"] == [".docx", ".pdf", ".txt"]
    assert "critical_thinking" in payload["evaluationDimensions"]


def test_analyze_batch_with_empty_middle_file(client, essay_text):
    body = {
        "files": [
            {"name": "alice.txt", "content": essay_text},
            {"name": "bob.txt", "content": ""},
            {"name": "carol.txt", "content": essay_text},
        ],
        "assignmentType": "essay",
    }
    r = client.post("/analyze", json=body)
    assert r.status_code == 200, r.text
    payload = r.json()
    assert payload["success"] is True
    assert payload["processedCount"] == 3
    results = payload["results"]
    assert [x["status"] for x in results] == ["success", "error", "success"]
    assert "empty" in results[1]["errorMessage"].lower()
    assert results[0]["studentName"] == "alice"
    assert 0.0 <= results[0]["analysis"]["overallQuality"] <= 1.0
    assert payload["summary"]["errorCount"] == 1
    assert payload["summary"]["processedStudents"] == 2


def test_analyze_requires_files(client):
    r = client.post("/analyze", json={"files": []})
    assert r.status_code == 400


def test_analyze_rejects_unknown_criteria(client, essay_text):
    r = client.post("/analyze", json={
        "files": [{"name": "a.txt", "content": essay_text}],
        "evaluationCriteria": ["clarity", "not_a_real_dimension"],
    })
    assert r.status_code == 400
    assert "not_a_real_dimension" in r.json()["detail"]


@pytest.mark.parametrize("kind", ["docx", "pdf"])
def test_upload_documents(client, kind, sample_pdf_bytes, sample_docx_bytes):
    if kind == "docx":
        files = [("files", ("sam_lee.docx", io.BytesIO(sample_docx_bytes), DOCX_TYPE))]
    else:
        files = [("files", ("sam_lee.pdf", io.BytesIO(sample_pdf_bytes), "application/pdf"))]
    r = client.post("/upload", files=files, data={"assignmentType": "report"})
    assert r.status_code == 200, r.text
    result = r.json()["results"][0]
    assert result["status"] == "success", result["errorMessage"]
    assert result["studentName"] == "sam"
    assert result["analysis"]["wordCount"] > 0
    assert result["analysis"]["metadata"]["assignmentType"] == "report"


def test_upload_mixed_batch_with_criteria(client, sample_pdf_bytes):
    files = [
        ("files", ("good.pdf", io.BytesIO(sample_pdf_bytes), "application/pdf")),
        ("files", ("bad.odt", io.BytesIO(b"binary"), "application/octet-stream")),
        ("files", ("plain.txt", io.BytesIO(b"A plain text answer about rivers."), "text/plain")),
    ]
    r = client.post("/upload", files=files, data={"evaluationCriteria": "clarity, depth"})
    assert r.status_code == 200, r.text
    results = r.json()["results"]
    assert [x["status"] for x in results] == ["success", "error", "success"]
    assert set(results[0]["analysis"]["dimensionScores"]) == {"clarity", "depth"}
    assert "bad.odt" in results[1]["errorMessage"]


def test_body_size_limit():
    app = FastAPI()
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=10)

    @app.post("/echo")
    async def echo():
        return {"ok": True}

    small = TestClient(app)
    assert small.post("/echo", content=b"tiny").status_code == 200
    assert small.post("/echo", content=b"x" * 100).status_code == 413


def test_upload_defaults_to_essay(client, sample_docx_bytes):
    files = [("files", ("kim.docx", io.BytesIO(sample_docx_bytes), DOCX_TYPE))]
    r = client.post("/upload", files=files)
    assert r.status_code == 200, r.text
    assert r.json()["results"][0]["analysis"]["metadata"]["assignmentType"] == "essay"
