"""
artifact_dao/dao_runtime/token_view.py
--------------------------------------

Read-only view over the governance token.

The engine never moves tokens. It only needs to:

- look up a balance:            balance_of(address)
- count the known holders:      holder_count()
- enumerate them (1-based):     holder_at(index)

`TokenView` is the structural contract; `InMemoryTokenView` is the adapter
the node and the tests use. Its `set_balance` exists for seeding from
config and for fixtures; it is not a transfer mechanism.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Protocol, Tuple


class TokenView(Protocol):
    def balance_of(self, address: str) -> int: ...

    def holder_count(self) -> int: ...

    def holder_at(self, index: int) -> str: ...


def iter_holders(view: TokenView) -> Iterator[Tuple[str, int]]:
    """Yield (address, balance) for every holder, in enumeration order."""
    for i in range(1, int(view.holder_count()) + 1):
        addr = view.holder_at(i)
        yield addr, int(view.balance_of(addr))


@dataclass
class InMemoryTokenView:
    """
    Dict-backed token view.

    Holders are kept in first-seen order; a holder stays enumerable even if
    their balance later drops to 0 (same as a registry that never forgets).
    """

    balances: Dict[str, int] = field(default_factory=dict)
    _holders: List[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        seeded = dict(self.balances)
        self.balances = {}
        self._holders = []
        for addr, amount in seeded.items():
            self.set_balance(addr, amount)

    @classmethod
    def from_mapping(cls, balances: Optional[Mapping[str, int]]) -> "InMemoryTokenView":
        return cls(balances=dict(balances or {}))

    def set_balance(self, address: str, amount: int) -> None:
        addr = str(address)
        amt = int(amount)
        if amt < 0:
            raise ValueError("balance must be >= 0")
        if addr not in self.balances:
            self._holders.append(addr)
        self.balances[addr] = amt

    # TokenView ---------------------------------------------------------

    def balance_of(self, address: str) -> int:
        return int(self.balances.get(str(address), 0))

    def holder_count(self) -> int:
        return len(self._holders)

    def holder_at(self, index: int) -> str:
        i = int(index)
        if i < 1 or i > len(self._holders):
            raise IndexError(f"holder index out of range: {i}")
        return self._holders[i - 1]
