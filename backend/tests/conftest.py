"""Pytest configuration and fixtures."""

import io
import json
import sys
from pathlib import Path

import httpx
import pytest

# Add backend directory to path so tests can import pdfchat modules
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from pdfchat.config import get_settings
from pdfchat.modules.generation import GeminiClient, ModelResolver, ResponseGenerator

API_BASE = "https://gemini.test/v1beta"


class FakeGemini:
    """In-memory stand-in for the Gemini REST API, served via httpx.MockTransport."""

    def __init__(self):
        self.model_pages: list[list[dict]] = [[self.model("models/gemini-2.5-flash")]]
        self.list_error: tuple[int, str] | None = None
        self.list_network_error: Exception | None = None
        self.generate_network_error: Exception | None = None
        self.replies: list[dict] = []
        self.list_calls = 0
        self.generate_calls: list[dict] = []
        self.transport = httpx.MockTransport(self.handle)

    @staticmethod
    def model(name: str, methods=("generateContent",)) -> dict:
        return {"name": name, "displayName": name, "supportedGenerationMethods": list(methods)}

    def set_models(self, *names: str) -> None:
        self.model_pages = [[self.model(name) for name in names]]

    def queue(self, status_code: int = 200, json_body=None, text: str | None = None, headers=None) -> None:
        """Queue a generateContent reply. The last queued reply repeats."""
        self.replies.append(
            {"status_code": status_code, "json": json_body, "text": text, "headers": headers or {}}
        )

    def queue_text(self, text: str) -> None:
        self.queue(json_body={"candidates": [{"content": {"parts": [{"text": text}]}}]})

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            if self.list_network_error is not None:
                raise self.list_network_error
            return self._list(request)

        model = request.url.path.split("/v1beta/", 1)[1].rsplit(":", 1)[0]
        self.generate_calls.append({
            "model": model,
            "body": json.loads(request.content),
            "key": request.url.params.get("key"),
        })
        if self.generate_network_error is not None:
            raise self.generate_network_error

        if not self.replies:
            raise AssertionError("Unexpected generateContent call")
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]

        if reply["json"] is not None:
            return httpx.Response(reply["status_code"], json=reply["json"], headers=reply["headers"])
        return httpx.Response(reply["status_code"], text=reply["text"] or "", headers=reply["headers"])

    def _list(self, request: httpx.Request) -> httpx.Response:
        self.list_calls += 1
        if self.list_error:
            return httpx.Response(self.list_error[0], text=self.list_error[1])

        token = request.url.params.get("pageToken")
        index = int(token) if token else 0
        page = {"models": self.model_pages[index]}
        if index + 1 < len(self.model_pages):
            page["nextPageToken"] = str(index + 1)
        return httpx.Response(200, json=page)


class RecordingSleep:
    """Replaces asyncio.sleep; records requested delays without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_generator(fake_gemini, sleeper):
    """Factory for a generator wired to the fake API."""
    def factory(override: str | None = None, max_attempts: int = 3, sleep=None) -> ResponseGenerator:
        client = GeminiClient(api_key="test-key", base_url=API_BASE, transport=fake_gemini.transport)
        resolver = ModelResolver(client, override=override)
        return ResponseGenerator(
            client,
            resolver,
            max_attempts=max_attempts,
            base_delay=1.0,
            max_delay=10.0,
            sleep=sleep or sleeper,
        )

    return factory


@pytest.fixture
def settings_env(tmp_path: Path, monkeypatch):
    """Point settings at a temporary data dir with a test API key."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


def build_pdf(text: str) -> bytes:
    """Single-page PDF whose content stream draws ``text`` in Helvetica."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


def build_blank_pdf() -> bytes:
    from pypdf import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def sample_pdf() -> bytes:
    return build_pdf("Paris is the capital of France")


@pytest.fixture
def blank_pdf() -> bytes:
    return build_blank_pdf()
