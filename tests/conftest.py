# File: tests/conftest.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator
from datetime import datetime, timezone
from typing import Dict

import pytest
from aiohttp import web

from domain_scout.config import ScannerConfig
from domain_scout.logger import LOGGER_NAME
from domain_scout.models import ProbeData, ProbeOutcome

#: fixed timestamp so stubbed outcomes compare equal across runs
FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on 127.0.0.1:*port*, yield its host:port, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def html_app(text: str, status: int = 200, content_type: str = "text/html") -> web.Application:
    """Application answering every GET / with the same response."""
    app = web.Application()

    async def handle_root(_):
        return web.Response(text=text, status=status, content_type=content_type)

    app.router.add_get("/", handle_root)
    return app


@pytest.fixture()
def ok_outcome() -> ProbeOutcome:
    return ProbeOutcome(
        domain="a.example",
        data=ProbeData(status=200, url="http://a.example/", title="T", body="hello"),
        time=FIXED_TIME,
        elapsed=0.25,
    )


@pytest.fixture()
def failed_outcome() -> ProbeOutcome:
    return ProbeOutcome(
        domain="c.example",
        error="Cannot connect to host c.example:80",
        time=FIXED_TIME,
        elapsed=0.01,
    )


class StubProber:
    """Deterministic prober: answers from a table, counts calls per domain."""

    def __init__(self, answers: Dict[str, ProbeData | str] | None = None, delay: float = 0.0):
        self.answers = answers or {}
        self.delay = delay
        self.calls: Dict[str, int] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def probe(self, domain: str) -> ProbeOutcome:
        self.calls[domain] = self.calls.get(domain, 0) + 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        answer = self.answers.get(domain, ProbeData(status=200, url=f"http://{domain}/"))
        if isinstance(answer, str):
            return ProbeOutcome(domain=domain, error=answer, time=FIXED_TIME)
        return ProbeOutcome(domain=domain, data=answer, time=FIXED_TIME)


@pytest.fixture()
def stub_prober_cls():
    return StubProber


@pytest.fixture()
def scout_log(caplog) -> Iterator[pytest.LogCaptureFixture]:
    """Route the project logger (which does not propagate) into caplog."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    try:
        yield caplog
    finally:
        lg.removeHandler(caplog.handler)


@pytest.fixture()
def base_config(tmp_path) -> ScannerConfig:
    """A config that writes into tmp_path and keeps probes short."""
    return ScannerConfig(
        registry_url="http://127.0.0.1:1/v2.json",
        registry_timeout=2.0,
        concurrency=4,
        timeout=1.0,
        user_agent="TestAgent/1.0",
        output=tmp_path / "domains.json",
    )
