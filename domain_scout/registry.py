# domain_scout/registry.py
"""
Domain registry client: fetches the list of candidate domains to probe.
"""
from __future__ import annotations

import asyncio
from typing import Any, Iterable, List

from aiohttp import ClientError, ClientSession, ClientTimeout

from domain_scout.logger import logger

__all__ = (
    "RegistryError",
    "RegistryNetworkError",
    "RegistryDecodeError",
    "list_domains",
    "extract_domains",
    "filter_domains",
)


class RegistryError(Exception):
    """The domain list could not be obtained; the run cannot proceed."""


class RegistryNetworkError(RegistryError):
    """Registry unreachable, timed out or answered with a non-2xx status."""


class RegistryDecodeError(RegistryError, ValueError):
    """Registry answered, but not with a JSON array."""


def extract_domains(payload: Any) -> List[str]:
    """Pull the ``domain`` field out of every registry entry."""
    if not isinstance(payload, list):
        raise RegistryDecodeError(
            f"Registry payload must be a JSON array, got {type(payload).__name__}"
        )
    domains: List[str] = []
    for index, entry in enumerate(payload):
        domain = entry.get("domain") if isinstance(entry, dict) else None
        if not isinstance(domain, str) or not domain:
            logger.warning("Skipping registry entry #%d without a domain: %r", index, entry)
            continue
        domains.append(domain)
    return domains


def filter_domains(domains: Iterable[str]) -> List[str]:
    """Drop entries containing ``_`` and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(d for d in domains if "_" not in d))


async def list_domains(session: ClientSession, url: str, *, timeout: float = 30.0) -> List[str]:
    """
    Fetch the registry at *url* and return the probe-able domains.

    Raises RegistryNetworkError or RegistryDecodeError; there is no retry.
    """
    try:
        async with session.get(url, timeout=ClientTimeout(total=timeout)) as resp:
            resp.raise_for_status()
            payload = await resp.json(content_type=None)
    except asyncio.TimeoutError as exc:
        raise RegistryNetworkError(f"Registry {url} did not answer within {timeout:g}s") from exc
    except ClientError as exc:
        raise RegistryNetworkError(f"Registry {url} failed: {str(exc) or type(exc).__name__}") from exc
    except ValueError as exc:
        raise RegistryDecodeError(f"Registry {url} returned invalid JSON: {exc}") from exc

    raw = extract_domains(payload)
    domains = filter_domains(raw)
    logger.info("Registry listed %d domains, %d left after filtering", len(raw), len(domains))
    return domains
