# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from tonbath import abi
from tonbath.abi import ContractInterface
from tonbath.actions import Action, ActionType, AuctionBidAction
from tonbath.address import AccountID
from tonbath.address_book import AUCTION_TG, AUCTION_TON, AUCTION_UNKNOWN
from tonbath.bubble import Bubble, BubbleInfo, TxBubble
from tonbath.straws.base import fold_children, sent_by, tx_of
from tonbath.trace_models import NftItem

AUCTION_GETGEMS = "getgems"


@dataclass
class AuctionBidBubble(BubbleInfo):
    bidder: AccountID
    auction: AccountID
    bid: int
    success: bool = True
    previous_bidder: Optional[AccountID] = None
    item: Optional[NftItem] = None
    # what the auction's own interfaces say; the address book has the last word
    auction_hint: str = AUCTION_UNKNOWN
    tg_init: bool = False

    def to_action(self, book=None):
        auction_type = self.auction_hint
        if book is not None:
            kind = book.auction_kind(self.auction)
            if kind != AUCTION_UNKNOWN:
                auction_type = kind
        action_type = ActionType.AUCTION_TG_INIT_BID if self.tg_init else ActionType.AUCTION_BID
        return Action.new(action_type, self.success, AuctionBidAction(
            bidder=self.bidder,
            bid=self.bid,
            auction=self.auction,
            previous_bidder=self.previous_bidder,
            item=self.item,
            auction_type=auction_type,
        ), book)


def _auction_hint(tx: TxBubble) -> str:
    if tx.implements(ContractInterface.TELEITEM):
        return AUCTION_TG
    if tx.implements(ContractInterface.DNS_ITEM):
        return AUCTION_TON
    if tx.implements(ContractInterface.NFT_AUCTION_GETGEMS):
        return AUCTION_GETGEMS
    return AUCTION_UNKNOWN


def _item(tx: TxBubble) -> Optional[NftItem]:
    return tx.additional_info.nft_item if tx.additional_info is not None else None


def find_auction_bid(bubble: Bubble) -> bool:
    """
    A plain transfer to an auction contract is a bid; the coins returned to the
    previous bidder in the same transaction are folded into it.
    """
    tx = tx_of(bubble)
    if tx is None or tx.input_from is None or tx.bounced or not tx.is_plain_transfer():
        return False
    hint = _auction_hint(tx)
    if hint == AUCTION_UNKNOWN:
        return False
    bid = AuctionBidBubble(
        bidder=tx.input_from.address,
        auction=tx.account.address,
        bid=tx.input_amount,
        success=tx.success,
        item=_item(tx),
        auction_hint=hint,
    )

    def absorb(child: Bubble) -> bool:
        ctx = tx_of(child)
        if bid.previous_bidder is not None or ctx is None or not sent_by(ctx, tx.account):
            return False
        if ctx.bounced or ctx.account.address == bid.bidder:
            return False
        returned = ctx.op_code in abi.REFUND_OPS or (hint == AUCTION_GETGEMS and ctx.is_plain_transfer())
        if not returned:
            return False
        bid.previous_bidder = ctx.account.address
        return True

    children = fold_children(bubble, bubble.children, absorb)
    bubble.add_accounts(bid.previous_bidder)
    bubble.info = bid
    bubble.children = children
    return True


def find_tg_auction_init_bid(bubble: Bubble) -> bool:
    """
    First bid on a Telegram username: the telemint collection deploys the item
    contract, which starts the auction with the bid attached.
    """
    tx = tx_of(bubble)
    if tx is None or not tx.operation(abi.TELEMINT_DEPLOY_OP) or tx.input_from is None:
        return False
    item_child = None
    for child in bubble.children:
        ctx = tx_of(child)
        if ctx is not None and ctx.operation(abi.TELEITEM_DEPLOY_OP) and sent_by(ctx, tx.account):
            item_child = child
            break
    if item_child is None:
        return False
    item_tx: TxBubble = item_child.info
    bid = AuctionBidBubble(
        bidder=tx.input_from.address,
        auction=item_tx.account.address,
        bid=tx.input_amount,
        success=tx.success and item_tx.success,
        item=_item(item_tx),
        auction_hint=AUCTION_TG,
        tg_init=True,
    )
    children = fold_children(bubble, bubble.children, lambda c: c is item_child)
    bubble.info = bid
    bubble.children = children
    return True
