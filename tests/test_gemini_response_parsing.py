try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import pytest

from file_insights.clients import gemini
from file_insights.clients.gemini import (
    GeminiClient,
    degraded_analysis_payload,
    parse_analysis_response,
)
from file_insights.core.config import GeminiSettings

PAYLOAD = {
    "analysis": {"Key Metrics": {"summary": "ok", "key_points": ["a"]}},
    "overall_summary": "fine",
    "confidence_score": 0.8,
}


@pytest.mark.parametrize(
    "wrapped",
    [
        "```json\n{body}\n```",
        "```JSON\n{body}\n```",
        "```\n{body}\n```",
        "  \n```json\n{body}\n```  \n",
        "\n```json\n{body}\n```",
        "\n```\n{body}\n```\n",
        "```json\n{body}",
    ],
)
def test_fenced_reply_matches_unfenced(wrapped: str) -> None:
    body = json.dumps(PAYLOAD, indent=2)

    assert parse_analysis_response(wrapped.format(body=body)) == parse_analysis_response(body)
    assert parse_analysis_response(body) == PAYLOAD


@pytest.mark.parametrize(
    "reply",
    [
        "The data looks great!",
        "",
        '{"analysis": {"Key Metrics": ',
        "Here you go: {\"analysis\": {}}",
        "[1, 2, 3]",
        '"just a string"',
    ],
)
def test_undecodable_reply_yields_degraded_payload(reply: str) -> None:
    assert parse_analysis_response(reply) == degraded_analysis_payload()


def test_degraded_payload_is_not_shared_between_calls() -> None:
    first = parse_analysis_response("nope")
    first["analysis"]["default"]["key_points"].append("mutated")

    assert parse_analysis_response("nope")["analysis"]["default"]["key_points"] == []


def test_nested_braces_survive_sanitizing() -> None:
    reply = '```json\n{"analysis": {"m": {"summary": "{braces} inside", "metrics": {"x": "{}"}}}}\n```'

    parsed = parse_analysis_response(reply)

    assert parsed["analysis"]["m"]["summary"] == "{braces} inside"
    assert parsed["analysis"]["m"]["metrics"] == {"x": "{}"}


def test_model_candidates_prioritize_configured_model() -> None:
    candidates = GeminiClient._collect_candidates(
        " gemini-1.5-pro ", ("gemini-1.5-flash", "gemini-1.5-pro", "")
    )

    assert candidates == ["gemini-1.5-pro", "gemini-1.5-flash"]


def test_fence_after_leading_newline_keeps_object() -> None:
    reply = "\n```json\n" + json.dumps({"analysis": {"m": {"summary": "ok"}}}) + "\n```"

    assert parse_analysis_response(reply) == {"analysis": {"m": {"summary": "ok"}}}


class _RecordingModel:
    calls: list[dict] = []

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    def generate_content(self, contents, **kwargs):
        _RecordingModel.calls.append({"model": self.model_name, **kwargs})
        return type("Reply", (), {"text": '{"analysis": {}}'})()


@pytest.mark.anyio
async def test_generation_requests_carry_a_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    _RecordingModel.calls = []
    monkeypatch.setattr(gemini.genai, "GenerativeModel", _RecordingModel)
    settings = GeminiSettings(
        GEMINI_API_KEY="key",
        GEMINI_MODEL_NAME="gemini-1.5-flash",
        GEMINI_REQUEST_TIMEOUT_SECONDS=3.5,
    )

    text = await GeminiClient(settings).generate_analysis("prompt")

    assert text == '{"analysis": {}}'
    assert len(_RecordingModel.calls) == 1
    assert _RecordingModel.calls[0]["model"] == "gemini-1.5-flash"
    assert _RecordingModel.calls[0]["request_options"] == {"timeout": 3.5}
