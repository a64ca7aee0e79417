# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional

from tonbath.abi import ContractInterface
from tonbath.actions import Refund, RefundType
from tonbath.bubble import Account, Bubble, TxBubble


@dataclass(frozen=True)
class Straw:
    """
    A named pattern matcher. ``merge`` inspects a bubble and, when its pattern
    holds, rewrites the bubble in place and returns True.
    """
    name: str
    merge: Callable[[Bubble], bool]

    def __call__(self, bubble: Bubble) -> bool:
        return self.merge(bubble)


def tx_of(bubble: Bubble) -> Optional[TxBubble]:
    return bubble.info if isinstance(bubble.info, TxBubble) else None


def sent_by(tx: TxBubble, account: Account) -> bool:
    return tx.input_from is not None and tx.input_from.address == account.address


def classify_refund(origin: Account) -> Refund:
    """Refund kind is decided by the contract that returned the coins."""
    if origin.implements(ContractInterface.TELEITEM, ContractInterface.TELEMINT_COLLECTION):
        refund_type = RefundType.DNS_TG
    elif origin.implements(ContractInterface.DNS_ITEM):
        refund_type = RefundType.DNS_TON
    elif origin.implements(ContractInterface.NFT_SALE_GETGEMS, ContractInterface.NFT_AUCTION_GETGEMS):
        refund_type = RefundType.GETGEMS
    else:
        refund_type = RefundType.UNKNOWN
    return Refund(type=refund_type, origin=origin.address.to_raw())


def fold_children(target: Bubble, children: List[Bubble], absorb: Callable[[Bubble], bool]) -> List[Bubble]:
    """
    Go over ``children`` in order; those ``absorb`` accepts are merged into
    ``target`` and replaced by their own children, the rest are kept.
    """
    result: List[Bubble] = []
    for child in children:
        if absorb(child):
            result.extend(target.absorb(child))
        else:
            result.append(child)
    return result
