# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from loguru import logger

from tonbath.address import AccountID

AUCTION_TON = "ton"
AUCTION_TG = "tg"
AUCTION_UNKNOWN = "unknown"


@dataclass
class AccountInfo:
    name: Optional[str] = None
    is_scam: bool = False
    is_wallet: bool = False


class AddressBook(Protocol):
    def resolve(self, account: AccountID) -> Optional[AccountInfo]:
        ...

    def auction_kind(self, account: AccountID) -> str:
        ...


class StaticAddressBook:
    """
    In-memory address book. Entries are keyed by account id; auction kinds are
    kept separately since most accounts are not auctions.
    """

    def __init__(self, accounts: Optional[Dict[AccountID, AccountInfo]] = None,
                 auctions: Optional[Dict[AccountID, str]] = None) -> None:
        self.accounts: Dict[AccountID, AccountInfo] = dict(accounts or {})
        self.auctions: Dict[AccountID, str] = dict(auctions or {})

    def resolve(self, account: AccountID) -> Optional[AccountInfo]:
        return self.accounts.get(account)

    def auction_kind(self, account: AccountID) -> str:
        return self.auctions.get(account, AUCTION_UNKNOWN)

    def update(self, other: "StaticAddressBook") -> None:
        self.accounts.update(other.accounts)
        self.auctions.update(other.auctions)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StaticAddressBook":
        """
        Build from ``{"<account>": {"name": ..., "is_scam": ..., "is_wallet": ..., "auction_kind": ...}}``.
        Entries with unparsable addresses are skipped with a warning.
        """
        book = cls()
        for raw, entry in (data or {}).items():
            try:
                account = AccountID.parse(raw)
            except ValueError as e:
                logger.warning(f"[ADDRESS_BOOK] skip entry: {e}")
                continue
            entry = entry or {}
            book.accounts[account] = AccountInfo(
                name=entry.get('name'),
                is_scam=bool(entry.get('is_scam', False)),
                is_wallet=bool(entry.get('is_wallet', False)),
            )
            kind = entry.get('auction_kind')
            if kind in (AUCTION_TON, AUCTION_TG):
                book.auctions[account] = kind
        return book
