# tests/conftest.py
from __future__ import annotations
import io

import pytest
from fastapi.testclient import TestClient

from bulk_feedback.main import app

import fitz  # PyMuPDF
import docx

ESSAY = (
    "This essay will discuss the role of public libraries in modern cities. "
    "Libraries offer free access to books, computers and study space for everyone.\n\n"
    "First, research shows that library use improves literacy in young readers. "
    "According to a 2019 study, children who visit weekly read 20% more books. "
    "Because of this, many cities have expanded their branch networks.\n\n"
    "However, some critics argue that digital media has made libraries obsolete. "
    "Although e-books are popular, they do not replace quiet study spaces. "
    "Therefore the evidence suggests that libraries remain important.\n\n"
    "In conclusion, libraries continue to support learning and community life. "
    "I believe their value will grow as more services move online."
)

# --------------------------------------------------------------------
# FastAPI test client available as fixture `client`
# --------------------------------------------------------------------
@pytest.fixture(scope="session")
def client() -> TestClient:
    return TestClient(app)

@pytest.fixture
def essay_text() -> str:
    return ESSAY

# --------------------------------------------------------------------
# Helpers to create in-memory sample PDF and DOCX
# --------------------------------------------------------------------
def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 100), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data

def _docx_bytes(text: str) -> bytes:
    d = docx.Document()
    for p in text.split("\n\n"):
        d.add_paragraph(p)
    buf = io.BytesIO()
    d.save(buf)
    return buf.getvalue()

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return _pdf_bytes("This is a smaple sentence about libraries.\nAnother line here.")

@pytest.fixture
def sample_docx_bytes() -> bytes:
    return _docx_bytes("This is a smaple sentence about libraries.\n\nAnother paragraph here.")

# --------------------------------------------------------------------
# Optional stubs: avoid requiring Java/LanguageTool during tests
# --------------------------------------------------------------------
class _FakeMatch:
    def __init__(self, msg="Possible spelling mistake found."):
        self.offset = 10
        self.errorLength = 6
        self.message = msg
        self.ruleId = "FAKE_RULE"
        self.ruleIssueType = "misspelling"
        self.replacements = ["sample", "simple"]

class _FakeLT:
    def check(self, text: str):
        return [_FakeMatch()] if "smaple" in text else []

@pytest.fixture(autouse=True)
def stub_language_tool(monkeypatch):
    from bulk_feedback.services import features as features_mod

    monkeypatch.setattr(features_mod, "LanguageTool", lambda *a, **k: _FakeLT())
