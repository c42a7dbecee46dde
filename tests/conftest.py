"""Shared pytest fixtures."""

import json
import os
import tempfile
from collections import deque
from pathlib import Path

import pytest

from toyclaw.embedder import Embedder
from toyclaw.errors import ComplianceError, ErrorCode
from toyclaw.providers import LLMClient

KEYWORDS = ["lead", "phthalate", "choking", "magnet", "label", "battery", "plush"]


class KeywordEmbedder(Embedder):
    """Deterministic embedder: one dimension per keyword plus a bias dimension.

    Set fail_on_batch to make the n-th embed_texts call raise.
    """

    def __init__(self, keywords: list[str] | None = None) -> None:
        self.keywords = keywords or KEYWORDS
        self.batches: list[list[str]] = []
        self.fail_on_batch: int | None = None

    @property
    def dim(self) -> int:
        return len(self.keywords) + 1

    def vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(k)) for k in self.keywords] + [0.1]

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        if self.fail_on_batch is not None and len(self.batches) == self.fail_on_batch:
            raise ComplianceError("quota exceeded", ErrorCode.EMBEDDING_PROVIDER_ERROR)
        return [self.vector(text) for text in texts]

    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        return self.embed_texts(texts)


class FakeLLMClient(LLMClient):
    """LLM client that replays queued envelopes or exceptions."""

    model = "fake/model"

    def __init__(self) -> None:
        self.responses: deque = deque()
        self.calls: list[dict] = []

    def push(self, item) -> None:
        self.responses.append(item)

    def push_text(self, text: str) -> None:
        self.push({"choices": [{"message": {"role": "assistant", "content": text}}]})

    async def acomplete(self, messages, temperature=None, response_format=None, timeout=None):
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "response_format": response_format,
                "timeout": timeout,
            }
        )
        item = self.responses.popleft()
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def sample_features():
    """Features of a red PVC teddy bear."""
    from toyclaw.models import ExtractedFeatures

    return ExtractedFeatures.model_validate(
        {
            "shape": {"category": "teddy bear"},
            "colors": [{"name": "red", "hex": "#FF0000"}, {"name": "brown"}],
            "material": [{"name": "PVC"}, {"name": "polyester plush"}],
            "style": [{"name": "cartoon"}],
        }
    )


@pytest.fixture
def report_payload():
    """A valid camelCase compliance report as a model would return it."""
    return {
        "applicableStandards": [
            {
                "standardId": "EN 71-3:2019",
                "standardName": "Migration of certain elements",
                "mandatory": True,
                "relevance": "Painted and plastic parts accessible to children",
            }
        ],
        "materialFindings": [
            {
                "material": "PVC",
                "concern": "May contain restricted phthalates",
                "requirement": "DEHP+BBP+DBP+DIBP total <= 0.1% by weight",
                "sourceStandard": "REACH Annex XVII Entry 51",
            }
        ],
        "ageGrading": {
            "recommendedAge": "3+",
            "reason": "Small detachable eyes",
            "requiredWarnings": ["WARNING: CHOKING HAZARD - Small parts"],
        },
        "labelRequirements": [
            {"item": "CE marking", "detail": "Visible on product or packaging", "mandatory": True}
        ],
        "certificationPath": [
            {"step": "Laboratory testing", "description": "EN 71-1/2/3 at an accredited lab"},
            {"step": "Declaration of conformity", "description": "Issue the EU DoC"},
        ],
        "summary": "The bear needs EN 71 testing and phthalate screening of its PVC parts.",
    }


@pytest.fixture
def report_json(report_payload):
    return json.dumps(report_payload)


@pytest.fixture
def clean_env(monkeypatch, temp_dir):
    """Run in an empty directory without toyclaw or provider variables."""
    for name in list(os.environ):
        if name.startswith("TOYCLAW_") or name == "GEMINI_API_KEY":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_dir)
    return Path(temp_dir)
