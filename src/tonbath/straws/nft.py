# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from tonbath import abi
from tonbath.abi import ContractInterface, NftTransferMsgBody
from tonbath.actions import (Action, ActionType, GetGemsNftPurchaseAction, HiddenTonValue, NftTransferAction,
                             Refund)
from tonbath.address import AccountID
from tonbath.bubble import Bubble, BubbleInfo
from tonbath.straws.base import classify_refund, fold_children, sent_by, tx_of


@dataclass
class NftTransferBubble(BubbleInfo):
    nft: AccountID
    success: bool = True
    sender: Optional[AccountID] = None
    recipient: Optional[AccountID] = None
    comment: Optional[str] = None
    refund: Optional[Refund] = None
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def to_action(self, book=None):
        return Action.new(ActionType.NFT_ITEM_TRANSFER, self.success, NftTransferAction(
            nft=self.nft,
            sender=self.sender,
            recipient=self.recipient,
            comment=self.comment,
            refund=self.refund,
            ton_attached=list(self.ton_attached),
        ), book)


@dataclass
class GetGemsNftPurchaseBubble(BubbleInfo):
    nft: AccountID
    new_owner: AccountID
    success: bool = True
    seller: Optional[AccountID] = None
    price: int = 0
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def to_action(self, book=None):
        return Action.new(ActionType.GETGEMS_NFT_PURCHASE, self.success, GetGemsNftPurchaseAction(
            nft=self.nft,
            new_owner=self.new_owner,
            seller=self.seller,
            price=self.price,
            ton_attached=list(self.ton_attached),
        ), book)


def find_nft_transfer(bubble: Bubble) -> bool:
    """
    The NFT item receives ``transfer`` from its owner; ownership notification,
    excesses and a bounce back to the owner are folded into the transfer.
    """
    tx = tx_of(bubble)
    if tx is None or not tx.operation(abi.NFT_TRANSFER_OP) or tx.input_from is None:
        return False
    body = tx.body(NftTransferMsgBody)
    transfer = NftTransferBubble(
        nft=tx.account.address,
        success=tx.success,
        sender=tx.input_from.address,
        recipient=body.new_owner if body is not None else None,
        comment=abi.text_comment(body.forward_payload) if body is not None else None,
    )

    def absorb(child: Bubble) -> bool:
        ctx = tx_of(child)
        if ctx is None or not sent_by(ctx, tx.account):
            return False
        if ctx.bounced and ctx.account.address == transfer.sender:
            transfer.refund = classify_refund(tx.account)
            return True
        if ctx.operation(abi.NFT_OWNERSHIP_ASSIGNED_OP) or ctx.operation(abi.EXCESS_OP):
            transfer.ton_attached.append(HiddenTonValue(account=ctx.account.address, amount=ctx.input_amount))
            return True
        return False

    children = fold_children(bubble, bubble.children, absorb)
    if transfer.success and transfer.recipient is not None:
        bubble.value_flow.add_nfts(transfer.sender, transfer.nft, -1)
        bubble.value_flow.add_nfts(transfer.recipient, transfer.nft, 1)
    bubble.add_accounts(transfer.recipient)
    bubble.info = transfer
    bubble.children = children
    return True


def find_getgems_nft_purchase(bubble: Bubble) -> bool:
    """
    A GetGems sale contract takes a buyer's payment, hands the NFT to the buyer
    and pays the previous owner, the marketplace and the royalty receiver.
    """
    tx = tx_of(bubble)
    if tx is None or tx.input_from is None or not tx.is_plain_transfer():
        return False
    if not tx.implements(ContractInterface.NFT_SALE_GETGEMS):
        return False
    sale = tx.account.address
    nft_child = None
    for child in bubble.children:
        if isinstance(child.info, NftTransferBubble) and child.info.sender == sale:
            nft_child = child
            break
    if nft_child is None:
        return False
    transfer: NftTransferBubble = nft_child.info
    info = tx.additional_info.nft_sale if tx.additional_info is not None else None
    purchase = GetGemsNftPurchaseBubble(
        nft=transfer.nft,
        new_owner=transfer.recipient or tx.input_from.address,
        success=tx.success and transfer.success,
        seller=info.owner if info is not None else None,
        price=info.nft_price if info is not None else tx.input_amount,
        ton_attached=list(transfer.ton_attached),
    )

    def absorb(child: Bubble) -> bool:
        if child is nft_child:
            return True
        ctx = tx_of(child)
        if ctx is not None and sent_by(ctx, tx.account) and ctx.is_plain_transfer() and not ctx.bounced:
            purchase.ton_attached.append(HiddenTonValue(account=ctx.account.address, amount=ctx.input_amount))
            return True
        return False

    children = fold_children(bubble, bubble.children, absorb)
    bubble.add_accounts(purchase.new_owner, purchase.seller)
    bubble.info = purchase
    bubble.children = children
    return True
