"""Type definitions for path execution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HopExecution:
    """Outcome of a single hop."""

    pool: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    skipped: bool = False


@dataclass(frozen=True)
class PathExecution:
    """Outcome of executing a whole path."""

    amount_in: int
    amount_out: int
    hops: tuple[HopExecution, ...] = field(default_factory=tuple)

    @property
    def skipped_hops(self) -> int:
        return sum(1 for hop in self.hops if hop.skipped)


__all__ = ["HopExecution", "PathExecution"]
