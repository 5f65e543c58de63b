"""Stub model clients and in-memory document builders shared by the tests."""

from __future__ import annotations

import asyncio
import io
import json
from typing import Iterable

from openpyxl import Workbook


def metric_reply(metric: str, *, summary: str | None = None, fenced: bool = False) -> str:
    """Model reply carrying a valid analysis entry for ``metric``."""
    body = json.dumps(
        {
            "analysis": {
                metric: {
                    "summary": summary or f"{metric} looks healthy",
                    "key_points": ["steady growth"],
                    "metrics": {"rows": "3"},
                    "recommendations": ["keep monitoring"],
                }
            },
            "overall_summary": "fine",
            "confidence_score": 0.9,
        }
    )
    if fenced:
        return f"```json\n{body}\n```"
    return body


def metric_in_prompt(prompt: str) -> str:
    for line in prompt.splitlines():
        if line.startswith("Required Metrics: "):
            return line[len("Required Metrics: ") :]
    raise AssertionError("prompt does not name a metric")


class EchoModel:
    """Answers every prompt with a valid entry for the requested metric."""

    def __init__(self, *, hang_on: Iterable[str] = ()) -> None:
        self.prompts: list[str] = []
        self._hang_on = set(hang_on)

    async def generate_analysis(self, prompt: str) -> str:
        self.prompts.append(prompt)
        metric = metric_in_prompt(prompt)
        if metric in self._hang_on:
            await asyncio.Event().wait()
        return metric_reply(metric)


class FailingModel:
    """Raises on every call."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self._error = error or RuntimeError("service unavailable")

    async def generate_analysis(self, prompt: str) -> str:
        self.calls += 1
        raise self._error


class ScriptedModel:
    """Returns queued replies in order; the last reply repeats."""

    def __init__(self, replies: list[str]) -> None:
        self.calls = 0
        self._replies = list(replies)

    async def generate_analysis(self, prompt: str) -> str:
        self.calls += 1
        if len(self._replies) > 1:
            return self._replies.pop(0)
        return self._replies[0]


class SlowModel:
    def __init__(self, delay: float) -> None:
        self.calls = 0
        self._delay = delay

    async def generate_analysis(self, prompt: str) -> str:
        self.calls += 1
        await asyncio.sleep(self._delay)
        return metric_reply(metric_in_prompt(prompt))


def build_workbook(sheets: dict[str, list[list[object]]]) -> bytes:
    """Serialize ``sheets`` (name -> rows, header first) as XLSX bytes."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        sheet = workbook.create_sheet(title=name)
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_pdf(page_streams: list[bytes | None]) -> bytes:
    """Assemble a minimal PDF; ``None`` produces a page without /Contents."""
    objects: dict[int, bytes] = {}
    page_numbers: list[int] = []
    next_number = 3
    for stream in page_streams:
        page_number = next_number
        next_number += 1
        page = b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792]"
        if stream is not None:
            content_number = next_number
            next_number += 1
            page += b" /Contents %d 0 R" % content_number
            objects[content_number] = (
                b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
            )
        objects[page_number] = page + b" >>"
        page_numbers.append(page_number)

    kids = b" ".join(b"%d 0 R" % number for number in page_numbers)
    objects[1] = b"<< /Type /Catalog /Pages 2 0 R >>"
    objects[2] = b"<< /Type /Pages /Kids [%s] /Count %d >>" % (kids, len(page_numbers))

    output = bytearray(b"%PDF-1.4\n")
    offsets: dict[int, int] = {}
    for number in range(1, next_number):
        offsets[number] = len(output)
        output += b"%d 0 obj\n" % number + objects[number] + b"\nendobj\n"

    xref_offset = len(output)
    output += b"xref\n0 %d\n" % next_number
    output += b"0000000000 65535 f \n"
    for number in range(1, next_number):
        output += b"%010d 00000 n \n" % offsets[number]
    output += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        next_number,
        xref_offset,
    )
    return bytes(output)
