"""
Per-proposal balance snapshot.

Captured once, at proposal creation, by copying every holder's balance
out of the token view. Later token movements never reach it.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping

from .token_view import TokenView, iter_holders


class BalanceSnapshot(Mapping[str, int]):
    __slots__ = ("_weights",)

    def __init__(self, weights: Mapping[str, int]) -> None:
        frozen: Dict[str, int] = {str(k): int(v) for k, v in weights.items()}
        self._weights = MappingProxyType(frozen)

    @classmethod
    def capture(cls, view: TokenView) -> "BalanceSnapshot":
        # Build the whole dict before wrapping it so a failing token view
        # never leaves a half-filled snapshot behind.
        weights: Dict[str, int] = {}
        for addr, balance in iter_holders(view):
            weights[addr] = balance
        return cls(weights)

    def weight_of(self, address: str) -> int:
        return int(self._weights.get(str(address), 0))

    def is_member(self, address: str) -> bool:
        return self.weight_of(address) > 0

    def total_weight(self) -> int:
        return sum(self._weights.values())

    def __getitem__(self, key: str) -> int:
        return self._weights[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return f"BalanceSnapshot({dict(self._weights)!r})"
