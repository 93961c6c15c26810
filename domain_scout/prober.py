# domain_scout/prober.py
"""
Prober module: one plain-HTTP GET per domain with a hard deadline.
"""
from __future__ import annotations

import asyncio
import time

from aiohttp import ClientError, ClientSession

from domain_scout.logger import logger
from domain_scout.models import ProbeData, ProbeOutcome
from domain_scout.parser.html_parser import ParsedPage, parse_html

__all__ = ("Prober",)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class Prober:
    """Fetches ``http://{domain}`` and turns whatever happens into a ProbeOutcome."""

    def __init__(self, session: ClientSession, timeout: float = 5.0) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.session = session
        self.timeout = timeout

    async def probe(self, domain: str) -> ProbeOutcome:
        """
        Probe *domain*.

        Never raises: network failures and the deadline expiring are recorded
        in ``ProbeOutcome.error``. The deadline covers connect, headers and
        the full body read.
        """
        url = f"http://{domain}"
        start = time.monotonic()
        try:
            async with asyncio.timeout(self.timeout):
                async with self.session.get(url, allow_redirects=True) as resp:
                    markup = await resp.read()
                    status = resp.status
                    final_url = str(resp.url)
        except asyncio.TimeoutError:
            error = f"Request aborted: timed out after {self.timeout:g}s"
        except ClientError as exc:
            error = _describe(exc)
        except Exception as exc:
            logger.debug("Unexpected error probing %s", domain, exc_info=True)
            error = f"Unexpected error: {_describe(exc)}"
        else:
            try:
                page = parse_html(markup)
            except Exception:
                logger.debug("Could not extract metadata for %s", domain, exc_info=True)
                page = ParsedPage()
            data = ProbeData(status=status, url=final_url, title=page.title, body=page.body)
            return ProbeOutcome.success(domain, data, elapsed=time.monotonic() - start)

        return ProbeOutcome.failure(domain, error, elapsed=time.monotonic() - start)
