# domain_scout/persist.py
"""
Persistence of the result store: JSON snapshot on disk, optionally gzip'ed.

Two policies share this module:

* eager — :meth:`Persister.schedule` after every recorded outcome; writes are
  serialized through one lock and a write is skipped when the store has not
  changed since the previous one, so bursts of requests coalesce.
* batch — a single :meth:`Persister.persist` once the pool has finished.
"""
from __future__ import annotations

import asyncio
import gzip
import json
import os
import zlib
from pathlib import Path
from typing import Dict, Mapping, Optional, Set, Union

from domain_scout.logger import logger
from domain_scout.models import ProbeOutcome
from domain_scout.store import ResultStore

__all__ = ("Persister",)


class Persister:
    """Writes snapshots of a ResultStore to a single file."""

    def __init__(self, path: Union[str, Path], *, compress: bool = False) -> None:
        self.path = Path(path)
        self.compress = compress
        self._lock = asyncio.Lock()
        self._written_version: Optional[int] = None
        self._pending: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------ #
    # Encoding                                                           #
    # ------------------------------------------------------------------ #

    def encode(self, outcomes: Mapping[str, ProbeOutcome]) -> bytes:
        payload = {domain: outcome.to_dict() for domain, outcome in outcomes.items()}
        raw = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return gzip.compress(raw) if self.compress else raw

    def decode(self, blob: bytes) -> Dict[str, ProbeOutcome]:
        raw = gzip.decompress(blob) if self.compress else blob
        payload = json.loads(raw.decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Snapshot must be a JSON object, got {type(payload).__name__}")
        return {domain: ProbeOutcome.from_dict(entry) for domain, entry in payload.items()}

    # ------------------------------------------------------------------ #
    # Writing                                                            #
    # ------------------------------------------------------------------ #

    def _write(self, outcomes: Mapping[str, ProbeOutcome]) -> None:
        """Encode and replace the file; runs in a worker thread."""
        blob = self.encode(outcomes)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_bytes(blob)
            os.replace(tmp, self.path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    async def persist(self, store: ResultStore) -> bool:
        """
        Write the current snapshot of *store*.

        Returns False when the write was skipped because the file already
        holds this version. Raises OSError if the file cannot be written.
        """
        async with self._lock:
            version, outcomes = store.snapshot()
            if version == self._written_version:
                logger.debug("Snapshot v%d already on disk, skipping write", version)
                return False
            await asyncio.to_thread(self._write, outcomes)
            self._written_version = version
            logger.debug("Saved %d outcomes (v%d) to %s", len(outcomes), version, self.path)
            return True

    async def _persist_reported(self, store: ResultStore) -> None:
        try:
            await self.persist(store)
        except OSError as exc:
            logger.error("Could not save results to %s: %s", self.path, exc)

    def schedule(self, store: ResultStore) -> asyncio.Task:
        """Start a background persist; failures are logged, never raised."""
        task = asyncio.create_task(self._persist_reported(store))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled persist to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------ #
    # Loading                                                            #
    # ------------------------------------------------------------------ #

    def load(self) -> ResultStore:
        """Read a previous snapshot; a missing or broken file gives an empty store."""
        if not self.path.exists():
            logger.info("No previous results at %s, starting empty", self.path)
            return ResultStore()
        try:
            outcomes = self.decode(self.path.read_bytes())
        except (OSError, EOFError, zlib.error, ValueError, KeyError, TypeError) as exc:
            logger.warning("Could not load results from %s (%s), starting empty", self.path, exc)
            return ResultStore()
        logger.info("Loaded %d previous outcomes from %s", len(outcomes), self.path)
        return ResultStore(outcomes)
