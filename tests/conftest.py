import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumeconvertor.cli_config import ConvertorSettings  # noqa: E402
from resumeconvertor.extraction_client import ResumeExtractionClient  # noqa: E402


def build_pdf(page_texts: List[str]) -> bytes:
    """Minimal valid PDF with one Helvetica text line per page."""
    n = len(page_texts)
    page_ids = [4 + 2 * i for i in range(n)]
    objects = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        2: (
            "<< /Type /Pages /Kids [%s] /Count %d >>"
            % (" ".join(f"{pid} 0 R" for pid in page_ids), n)
        ).encode("ascii"),
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    for i, text in enumerate(page_texts):
        page_id, content_id = page_ids[i], page_ids[i] + 1
        stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode("ascii")
        objects[content_id] = (
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in sorted(objects):
        offsets[obj_id] = len(out)
        out += b"%d 0 obj\n" % obj_id + objects[obj_id] + b"\nendobj\n"
    xref_pos = len(out)
    size = max(objects) + 1
    out += b"xref\n0 %d\n" % size
    out += b"0000000000 65535 f \n"
    for obj_id in range(1, size):
        out += b"%010d 00000 n \n" % offsets[obj_id]
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (size, xref_pos)
    return bytes(out)


def completion(content):
    """Shape of an openai ChatCompletion with a single choice."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))]
    )


def make_client(*responses, prompt: str = "Extract the resume as JSON."):
    """ResumeExtractionClient backed by a mocked AsyncOpenAI."""
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(side_effect=list(responses))
    client = ResumeExtractionClient(prompt, api_key="test-key", _client=sdk)
    return client, sdk


@pytest.fixture
def pdf_factory(tmp_path: Path):
    def _make(page_texts: List[str], name: str = "resume.pdf") -> Path:
        path = tmp_path / name
        path.write_bytes(build_pdf(page_texts))
        return path

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> ConvertorSettings:
    return ConvertorSettings(
        api_key="test-key",
        output_directory=tmp_path / "Output",
    )


@pytest.fixture
def sample_answer() -> str:
    data = {
        "Full Name": "Jane Doe",
        "Title": "Senior Data Engineer",
        "Email": "jane@example.com",
        "Phone Number": "+1 555 0100",
        "LinkedIn": "https://linkedin.com/in/janedoe",
        "Location": "Berlin",
        "Strengths": "Builds <b>reliable</b> pipelines.",
        "Skill Matrix": [
            {"Skill": "Python", "Years of Experience": 8, "Proficiency": "Expert"},
            {"Skill": "SQL", "Years of Experience": 10, "Proficiency": "Expert"},
        ],
        "Key_Achievements": ["Cut batch runtime by <i>40%</i>"],
        "Education": [{"Degree": "MSc Computer Science", "Institution": "TU Berlin", "Year": "2012"}],
        "Projects": [
            {
                "Project Name": "Lakehouse migration",
                "Role": "Lead",
                "Responsibilities": ["Designed ingestion", "Led a team of 4"],
            }
        ],
        "Certifications": ["AWS Solutions Architect"],
        "Software_Training": "Spark, Airflow",
        "References": [{"Name": "John Roe", "Position": "CTO", "Contact": "john@example.com"}],
    }
    return "```json\n" + json.dumps(data, indent=2) + "\n```"


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def client_factory():
    return make_client
