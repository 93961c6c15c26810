# File: domain_scout/engine.py
"""domain_scout.engine: orchestration of one probing run."""

from __future__ import annotations

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from domain_scout.config import ScannerConfig
from domain_scout.logger import logger
from domain_scout.persist import Persister
from domain_scout.pool import WorkerPool
from domain_scout.prober import Prober
from domain_scout.registry import list_domains
from domain_scout.store import ResultStore

__all__ = ["start_scan"]


async def start_scan(cfg: ScannerConfig) -> ResultStore:
    """
    List domains, probe them all and persist the results.

    RegistryError propagates and aborts the run. The final persist always
    happens; if it fails, OSError propagates after the run.
    """
    persister = Persister(cfg.output, compress=cfg.compress)
    store = persister.load() if cfg.resume else ResultStore()

    connector = TCPConnector(limit=cfg.concurrency, ttl_dns_cache=300)
    async with ClientSession(
        connector=connector,
        timeout=ClientTimeout(total=None),
        headers={"User-Agent": cfg.user_agent},
        raise_for_status=False,
    ) as session:
        domains = await list_domains(session, str(cfg.registry_url), timeout=cfg.registry_timeout)
        queue = [d for d in domains if d not in store] if cfg.resume else list(domains)
        if cfg.resume:
            logger.info("Resuming: %d already probed, %d to go", len(domains) - len(queue), len(queue))

        prober = Prober(session, timeout=cfg.timeout)
        on_record = persister.schedule if cfg.persist_mode == "eager" else None
        try:
            await WorkerPool(cfg.concurrency).run(queue, prober, store, on_record=on_record)
        finally:
            await persister.drain()

    await persister.persist(store)
    logger.info("Results saved to %s (%d domains)", cfg.output, len(store))
    return store
