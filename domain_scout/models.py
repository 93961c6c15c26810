# domain_scout/models.py
"""
Data models for DomainScout probe results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ProbeData:
    """What a delivered HTTP response told us about the domain."""

    status: int
    url: str
    title: Optional[str] = None
    body: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status, "url": self.url}
        if self.title is not None:
            out["title"] = self.title
        if self.body is not None:
            out["body"] = self.body
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> ProbeData:
        if not isinstance(raw, dict):
            raise TypeError(f"probe data must be an object, got {type(raw).__name__}")
        return cls(
            status=int(raw["status"]),
            url=str(raw["url"]),
            title=raw.get("title"),
            body=raw.get("body"),
        )


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    """
    Result of probing one domain.

    Exactly one of ``data`` and ``error`` is set: ``data`` when a response was
    fully read, ``error`` when the probe failed before that.
    """

    domain: str
    data: Optional[ProbeData] = None
    error: Optional[str] = None
    time: datetime = field(default_factory=_utcnow)
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError(f"{self.domain}: exactly one of data/error must be set")

    @classmethod
    def success(cls, domain: str, data: ProbeData, elapsed: float = 0.0) -> ProbeOutcome:
        return cls(domain=domain, data=data, elapsed=elapsed)

    @classmethod
    def failure(cls, domain: str, error: str, elapsed: float = 0.0) -> ProbeOutcome:
        return cls(domain=domain, error=error, elapsed=elapsed)

    @property
    def ok(self) -> bool:
        return self.data is not None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping; unset optional fields are left out."""
        out: Dict[str, Any] = {
            "domain": self.domain,
            "time": self.time.isoformat(),
            "elapsed": self.elapsed,
        }
        if self.data is not None:
            out["data"] = self.data.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> ProbeOutcome:
        if not isinstance(raw, dict):
            raise TypeError(f"outcome must be an object, got {type(raw).__name__}")
        data = raw.get("data")
        return cls(
            domain=str(raw["domain"]),
            data=ProbeData.from_dict(data) if data is not None else None,
            error=raw.get("error"),
            time=datetime.fromisoformat(raw["time"]),
            elapsed=float(raw.get("elapsed", 0.0)),
        )


__all__ = ["ProbeData", "ProbeOutcome"]
