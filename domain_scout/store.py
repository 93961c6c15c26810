# domain_scout/store.py
"""
In-memory result store: latest ProbeOutcome per domain.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from domain_scout.models import ProbeOutcome

__all__ = ("ResultStore",)


class ResultStore:
    """
    Concurrency-safe mapping ``domain -> ProbeOutcome``.

    ``version`` grows by one on every record, so a persister can tell whether
    anything changed since its last write.
    """

    def __init__(self, outcomes: Optional[Mapping[str, ProbeOutcome]] = None) -> None:
        self._lock = threading.Lock()
        self._outcomes: Dict[str, ProbeOutcome] = dict(outcomes or {})
        self._version = 0

    def record(self, outcome: ProbeOutcome) -> None:
        with self._lock:
            self._outcomes[outcome.domain] = outcome
            self._version += 1

    def get(self, domain: str) -> Optional[ProbeOutcome]:
        with self._lock:
            return self._outcomes.get(domain)

    def snapshot(self) -> Tuple[int, Dict[str, ProbeOutcome]]:
        """Return ``(version, copy)`` taken atomically."""
        with self._lock:
            return self._version, dict(self._outcomes)

    @property
    def version(self) -> int:
        return self._version

    def domains(self) -> List[str]:
        with self._lock:
            return list(self._outcomes)

    def outcomes(self) -> List[ProbeOutcome]:
        with self._lock:
            return list(self._outcomes.values())

    def __contains__(self, domain: object) -> bool:
        with self._lock:
            return domain in self._outcomes

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.domains())

    def __repr__(self) -> str:
        return f"<ResultStore entries={len(self)} version={self._version}>"
