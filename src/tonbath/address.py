# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass

from pytoniq_core import Address


@dataclass(frozen=True, order=True)
class AccountID:
    """
    Account identifier: signed 32-bit workchain plus 32-byte account hash.
    Ordering is (workchain, address) so sorted output is deterministic.
    """
    workchain: int
    address: bytes

    def __post_init__(self):
        if len(self.address) != 32:
            raise ValueError(f"account hash must be 32 bytes, got {len(self.address)}")
        if not -2 ** 31 <= self.workchain < 2 ** 31:
            raise ValueError(f"workchain {self.workchain} does not fit int32")

    @classmethod
    def from_raw(cls, raw: str) -> "AccountID":
        if not isinstance(raw, str) or ':' not in raw:
            raise ValueError(f"invalid raw account id: {raw!r}")
        wc, hexpart = raw.split(':', 1)
        try:
            return cls(int(wc), bytes.fromhex(hexpart.strip().zfill(64)))
        except ValueError as e:
            raise ValueError(f"invalid raw account id: {raw!r}") from e

    @classmethod
    def parse(cls, s: str) -> "AccountID":
        """
        Accept both raw (``0:abcd...``) and user-friendly (``EQ...``) forms.
        """
        if isinstance(s, str) and ':' in s:
            return cls.from_raw(s)
        try:
            addr = Address(s)
        except Exception as e:
            raise ValueError(f"invalid account id: {s!r}") from e
        return cls(addr.wc, bytes(addr.hash_part))

    def to_raw(self) -> str:
        return f"{self.workchain}:{self.address.hex()}"

    def to_bytes(self) -> bytes:
        return self.workchain.to_bytes(4, 'big', signed=True) + self.address

    def to_user_friendly(self, bounceable: bool = True, testnet: bool = False) -> str:
        return Address((self.workchain, self.address)).to_str(is_user_friendly=True, is_url_safe=True,
                                                              is_bounceable=bounceable, is_test_only=testnet)

    def short(self, n: int = 8) -> str:
        return f"{self.workchain}:…{self.address.hex()[-n:]}"

    def __str__(self) -> str:
        return self.to_raw()
