"""Test doubles for the extraction service."""

import asyncio
import json
import re

from cause_list_extractor.config import ExtractionConfig, GPT35_TURBO, GPT41_MINI


PRIMARY_MARKER = "PDF TEXT TO PARSE:\n"
SIMPLIFIED_MARKER = "\nText: "

_HEADING_RE = re.compile(r"^BENCH\s+(\S+)\s*$")
_ENTRY_RE = re.compile(r"^(\d+)\.\s+(\S+)\s*$")


def make_config(**overrides) -> ExtractionConfig:
    values = dict(
        model=GPT41_MINI,
        fallback_model=GPT35_TURBO,
        rate_limit_retry_base_delay=0.0,
        request_timeout_seconds=5.0,
    )
    values.update(overrides)
    return ExtractionConfig(**values)


def document_text(request) -> str:
    """The document slice embedded in a prompt."""
    if request.variant == "primary":
        return request.user_prompt.split(PRIMARY_MARKER, 1)[1]
    return request.user_prompt.split(SIMPLIFIED_MARKER, 1)[1]


def fake_extraction(text: str) -> str:
    """What a perfect model would answer for the 'BENCH X / N. CASE' fixtures."""
    benches = []
    for line in text.splitlines():
        heading = _HEADING_RE.match(line.strip())
        if heading:
            benches.append({"benchName": f"BENCH {heading.group(1)}", "cases": []})
            continue
        entry = _ENTRY_RE.match(line.strip())
        if entry and benches:
            benches[-1]["cases"].append({
                "serialNumber": entry.group(1),
                "caseNumber": entry.group(2),
                "petitioner": "dropped",
            })
    return json.dumps({
        "court": "NATIONAL COMPANY LAW TRIBUNAL",
        "date": "17-09-2025",
        "benches": benches,
    })


class StubClient:
    """Records requests and answers them with ``responder(request)``.

    The responder may return a string, raise, or return an exception
    instance (which is then raised).
    """

    def __init__(self, responder, delay=0.0):
        self.responder = responder
        self.delay = delay
        self.requests = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def extract(self, request) -> str:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delay(request) if callable(self.delay) else self.delay
            if delay:
                await asyncio.sleep(delay)
            else:
                await asyncio.sleep(0)
            answer = self.responder(request)
            if isinstance(answer, Exception):
                raise answer
            return answer
        finally:
            self.in_flight -= 1

    @property
    def variants(self):
        return [request.variant for request in self.requests]


def bench_block(name: str, first_serial: int, count: int) -> str:
    """Fixed-width block: heading line plus ``count`` entry lines."""
    lines = [f"BENCH {name}"]
    for serial in range(first_serial, first_serial + count):
        lines.append(f"{serial:03d}. CASE/{name}{serial:03d}/2025")
    return "\n".join(lines) + "\n"
