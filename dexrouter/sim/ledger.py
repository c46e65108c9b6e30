"""In-memory ledger with call-level atomicity."""

from __future__ import annotations

import contextlib
import copy
import hashlib
from collections.abc import Iterator
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()


def make_address(label: str) -> str:
    """Deterministic 20-byte address derived from a label."""
    return "0x" + hashlib.sha256(label.encode()).hexdigest()[:40]


@dataclass
class LedgerState:
    """Every mutable balance the simulated collaborators share."""

    # (token, owner) -> balance
    balances: dict[tuple[str, str], int] = field(default_factory=dict)
    # (token, owner, spender) -> allowance
    allowances: dict[tuple[str, str, str], int] = field(default_factory=dict)
    # token -> total supply
    supplies: dict[str, int] = field(default_factory=dict)
    # owner -> native currency balance
    native: dict[str, int] = field(default_factory=dict)
    # (pool, referral) -> input volume routed with that referral
    referrals: dict[tuple[str, str], int] = field(default_factory=dict)


class Ledger:
    """Shared state for simulated tokens and pools.

    atomic() snapshots the whole state and restores it if the body raises,
    which is how a router call reverts as a unit. Scopes may nest; an inner
    failure that the outer body handles only undoes the inner changes.
    """

    def __init__(self) -> None:
        self.state = LedgerState()

    @contextlib.contextmanager
    def atomic(self) -> Iterator[Ledger]:
        snapshot = copy.deepcopy(self.state)
        try:
            yield self
        except BaseException:
            self.state = snapshot
            logger.debug("ledger_reverted")
            raise

    # --- Fungible balances ---

    def balance(self, token: str, owner: str) -> int:
        return self.state.balances.get((token, owner), 0)

    def set_balance(self, token: str, owner: str, amount: int) -> None:
        if amount:
            self.state.balances[(token, owner)] = amount
        else:
            self.state.balances.pop((token, owner), None)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self.state.allowances.get((token, owner, spender), 0)

    def set_allowance(self, token: str, owner: str, spender: str, amount: int) -> None:
        self.state.allowances[(token, owner, spender)] = amount

    def supply(self, token: str) -> int:
        return self.state.supplies.get(token, 0)

    def set_supply(self, token: str, amount: int) -> None:
        self.state.supplies[token] = amount

    # --- Native currency ---

    def native_balance(self, owner: str) -> int:
        return self.state.native.get(owner, 0)

    def set_native_balance(self, owner: str, amount: int) -> None:
        self.state.native[owner] = amount

    # --- Referral bookkeeping ---

    def record_referral(self, pool: str, referral: str, volume: int) -> None:
        key = (pool, referral)
        self.state.referrals[key] = self.state.referrals.get(key, 0) + volume

    def referral_volume(self, pool: str, referral: str) -> int:
        return self.state.referrals.get((pool, referral), 0)


__all__ = ["Ledger", "LedgerState", "make_address"]
