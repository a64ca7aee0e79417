# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from tonbath.address import AccountID
from tonbath.address_book import StaticAddressBook
from tonbath.straws import Straw, select


@dataclass
class Config:
    # Logging / output
    loglevel: int = 1
    output_path: Optional[str] = None
    indent: Optional[int] = 2

    # Summarizer
    for_account_raw: Optional[str] = None
    for_account: Optional[AccountID] = None
    disabled_straws: List[str] = field(default_factory=list)

    # Address book
    address_book_path: Optional[str] = None
    address_book_raw: Optional[Dict[str, Any]] = None

    def log_level_name(self) -> str:
        if self.loglevel <= 0:
            return "WARNING"
        if self.loglevel == 1:
            return "INFO"
        return "DEBUG"

    def straws(self) -> List[Straw]:
        return select(self.disabled_straws)

    def address_book(self) -> StaticAddressBook:
        return StaticAddressBook.from_dict(self.address_book_raw or {})

    def load_address_book(self, path: Optional[str]) -> None:
        self.address_book_path = path or None
        self.address_book_raw = None
        if not self.address_book_path:
            return
        try:
            with open(self.address_book_path, "r") as f:
                self.address_book_raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Can't load address book {self.address_book_path}: {e}")
            self.address_book_raw = None

    def set_for_account(self, raw: Optional[str]) -> None:
        """Raises ValueError on an unparsable account."""
        self.for_account_raw = (raw or "").strip() or None
        self.for_account = AccountID.parse(self.for_account_raw) if self.for_account_raw else None

    @classmethod
    def from_env(cls) -> "Config":
        cfg = cls()
        # Logging / output
        cfg.loglevel = int(os.getenv("BATH_LOGLEVEL", 1))
        cfg.output_path = os.getenv("BATH_OUTPUT", "").strip() or None
        indent = os.getenv("BATH_INDENT", "").strip()
        cfg.indent = int(indent) if indent else 2
        if cfg.indent <= 0:
            cfg.indent = None

        # Summarizer
        cfg.set_for_account(os.getenv("BATH_FOR_ACCOUNT"))
        disabled = os.getenv("BATH_DISABLED_STRAWS", "")
        cfg.disabled_straws = [s.strip() for s in disabled.split(",") if s.strip()]

        # Address book
        cfg.load_address_book(os.getenv("ADDRESS_BOOK_PATH", "").strip())
        return cfg
