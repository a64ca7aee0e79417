# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

from tonbath.address import AccountID


@dataclass
class AccountValueFlow:
    ton: int = 0
    fees: int = 0
    jettons: Dict[AccountID, int] = field(default_factory=dict)
    nfts: Dict[AccountID, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ton': self.ton,
            'fees': self.fees,
            'jettons': {str(k): str(v) for k, v in sorted(self.jettons.items())},
            'nfts': {str(k): v for k, v in sorted(self.nfts.items())},
        }


class ValueFlow:
    """
    Per-account accounting of native coin, jettons and NFTs.

    - ``ton`` is the net native coin delta excluding fees.
    - ``fees`` is the total fee charged to the account.
    - ``jettons`` maps a jetton master to a signed delta of unbounded size.
    - ``nfts`` maps an NFT item to +1 (acquired) / -1 (sent).

    Merging is additive; merging the same flow twice counts it twice.
    """

    def __init__(self) -> None:
        self.accounts: Dict[AccountID, AccountValueFlow] = {}

    def _entry(self, account: AccountID) -> AccountValueFlow:
        flow = self.accounts.get(account)
        if flow is None:
            flow = AccountValueFlow()
            self.accounts[account] = flow
        return flow

    def add_tons(self, account: AccountID, amount: int) -> None:
        self._entry(account).ton += amount

    def add_jettons(self, account: AccountID, jetton: AccountID, amount: int) -> None:
        jettons = self._entry(account).jettons
        jettons[jetton] = jettons.get(jetton, 0) + amount

    def add_nfts(self, account: AccountID, nft: AccountID, count: int) -> None:
        nfts = self._entry(account).nfts
        nfts[nft] = nfts.get(nft, 0) + count

    def set_fees(self, account: AccountID, fees: int) -> None:
        self._entry(account).fees = fees

    def merge(self, other: "ValueFlow") -> None:
        for account, af in other.accounts.items():
            entry = self._entry(account)
            entry.ton += af.ton
            entry.fees += af.fees
            for jetton, amount in af.jettons.items():
                entry.jettons[jetton] = entry.jettons.get(jetton, 0) + amount
            for nft, count in af.nfts.items():
                entry.nfts[nft] = entry.nfts.get(nft, 0) + count
            entry.jettons = {k: v for k, v in entry.jettons.items() if v != 0}
            entry.nfts = {k: v for k, v in entry.nfts.items() if v != 0}

    def total_ton(self) -> int:
        return sum(af.ton for af in self.accounts.values())

    def total_fees(self) -> int:
        return sum(af.fees for af in self.accounts.values())

    def to_dict(self) -> Dict[str, Any]:
        return {str(account): af.to_dict() for account, af in sorted(self.accounts.items())}

    def __repr__(self) -> str:
        return f"ValueFlow({self.accounts!r})"
