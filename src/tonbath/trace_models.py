# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from tonbath.abi import DecodedBody
from tonbath.address import AccountID


class AccountStatus(str, Enum):
    UNINIT = "uninit"
    ACTIVE = "active"
    FROZEN = "frozen"
    NONEXIST = "nonexist"


class TxType(str, Enum):
    ORDINARY = "ordinary"
    TICK_TOCK = "tick_tock"


# Compute phase skip reasons
SKIP_REASON_NO_STATE = "no_state"


@dataclass
class ComputePhase:
    skipped: bool = False
    skip_reason: Optional[str] = None


@dataclass
class Message:
    """
    Inbound message of a transaction. ``source`` is None for external messages.
    """
    destination: AccountID
    source: Optional[AccountID] = None
    value: int = 0
    fwd_fee: int = 0
    bounce: bool = False
    bounced: bool = False
    op_code: Optional[int] = None
    decoded_body: Optional[DecodedBody] = None
    init: Optional[bytes] = None
    init_interfaces: List[str] = field(default_factory=list)

    @property
    def is_external(self) -> bool:
        return self.source is None


@dataclass
class OutMessage:
    """
    Outbound message that did not produce a transaction inside the trace
    (messages that did are represented by the corresponding child's in_msg).
    """
    destination: Optional[AccountID] = None
    value: int = 0
    fwd_fee: int = 0
    op_code: Optional[int] = None


@dataclass
class NftItem:
    address: AccountID
    index: int = 0
    collection: Optional[AccountID] = None
    owner: Optional[AccountID] = None
    verified: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NftSaleContract:
    nft_price: int = 0
    owner: Optional[AccountID] = None
    market_fee: int = 0
    royalty_amount: int = 0


@dataclass
class SubscriptionInfo:
    wallet: Optional[AccountID] = None
    beneficiary: Optional[AccountID] = None
    amount: int = 0


@dataclass
class TraceAdditionalInfo:
    """
    Side-channel facts fetched by whoever built the trace, keyed to the
    transaction's account.
    """
    jetton_master: Optional[AccountID] = None
    nft_item: Optional[NftItem] = None
    nft_sale: Optional[NftSaleContract] = None
    subscription: Optional[SubscriptionInfo] = None


@dataclass
class Trace:
    """
    One executed transaction and the transactions its outbound messages caused.
    The summarizer treats instances as read-only.
    """
    account: AccountID
    success: bool = True
    tx_type: TxType = TxType.ORDINARY
    account_interfaces: List[str] = field(default_factory=list)
    compute_phase: Optional[ComputePhase] = None
    orig_status: AccountStatus = AccountStatus.ACTIVE
    end_status: AccountStatus = AccountStatus.ACTIVE
    in_msg: Optional[Message] = None
    out_msgs: List[OutMessage] = field(default_factory=list)
    total_fee: int = 0
    additional_info: Optional[TraceAdditionalInfo] = None
    children: List["Trace"] = field(default_factory=list)
    lt: int = 0
    hash: Optional[str] = None

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def external_input(self) -> int:
        """Total value brought into the trace by external inbound messages."""
        return sum(t.in_msg.value for t in self.walk() if t.in_msg is not None and t.in_msg.is_external)
