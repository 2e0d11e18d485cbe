"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any settings object is built so tests
never depend on a developer's .env file or real credentials.
"""

import os
from typing import Any, Callable, Iterable

import pytest

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("LLM_MODEL", "gemini-2.5-flash")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")
# Never let a developer's database leak into tests
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_URL", None)

from resume_scan.adapters.llm.base import AbstractLLMClient  # noqa: E402
from resume_scan.adapters.storage.in_memory import InMemoryAnalysisRepository  # noqa: E402
from resume_scan.core.config import (  # noqa: E402
    AppSettings,
    DatabaseSettings,
    LLMSettings,
    LogSettings,
    RetrySettings,
    Settings,
)
from resume_scan.core.errors import FatalUpstreamError, RetryableUpstreamError  # noqa: E402

VALID_MODEL_JSON = '{"score": 72, "missingKeywords": ["Kubernetes", "GraphQL"], "advice": "Add cloud projects."}'


class StubLLMClient(AbstractLLMClient):
    """Scripted model client.

    Each call consumes the next outcome; the last one repeats once the script
    runs out. Exceptions are raised, strings are returned.
    """

    provider = "stub"
    model = "stub-model"

    def __init__(self, outcomes: Iterable[Any]) -> None:
        self.outcomes = list(outcomes)
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes[min(len(self.prompts), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def overloaded_error() -> RetryableUpstreamError:
    return RetryableUpstreamError(
        code="llm_overloaded",
        message="503 UNAVAILABLE. The model is overloaded. Please try again later.",
        details={"http_status": 503},
    )


def fatal_error(status: int = 400) -> FatalUpstreamError:
    return FatalUpstreamError(
        code="llm_upstream_error",
        message=f"400 INVALID_ARGUMENT. API key not valid (HTTP {status})",
        details={"http_status": status},
    )


def build_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF whose text layer contains ``lines``."""
    ops = ["BT", "/F1 11 Tf", "14 TL", "72 750 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({escaped}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

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

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_at,
    )
    return bytes(out)


@pytest.fixture
def make_llm() -> Callable[..., StubLLMClient]:
    """Factory for scripted model clients: ``make_llm(overloaded, VALID_JSON)``."""

    def _make(*outcomes: Any) -> StubLLMClient:
        return StubLLMClient(outcomes or [VALID_MODEL_JSON])

    return _make


@pytest.fixture
def repository() -> InMemoryAnalysisRepository:
    return InMemoryAnalysisRepository()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with zero backoff so retry paths run instantly."""
    return Settings(
        llm=LLMSettings(provider="gemini", model="gemini-2.5-flash", api_key="test-key-123"),
        retry=RetrySettings(max_attempts=5, initial_delay_ms=0, backoff_multiplier=1.5),
        database=DatabaseSettings(url=None),
        app=AppSettings(),
        log=LogSettings(level="WARNING"),
    )


@pytest.fixture
def resume_pdf() -> bytes:
    return build_pdf(
        [
            "Jane Doe - Senior Python Developer",
            "Experience: 8 years building REST APIs with FastAPI and Django",
            "Skills: Python, PostgreSQL, Docker, AWS",
        ]
    )
