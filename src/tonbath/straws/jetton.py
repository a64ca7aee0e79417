# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from tonbath import abi
from tonbath.abi import JettonTransferMsgBody
from tonbath.actions import Action, ActionType, HiddenTonValue, JettonTransferAction, Refund
from tonbath.address import AccountID
from tonbath.bubble import Account, Bubble, BubbleInfo, TxBubble
from tonbath.straws.base import classify_refund, fold_children, sent_by, tx_of


@dataclass
class JettonTransferBubble(BubbleInfo):
    jetton: Optional[AccountID]
    senders_wallet: AccountID
    amount: int
    success: bool = True
    sender: Optional[AccountID] = None
    recipient: Optional[AccountID] = None
    recipients_wallet: Optional[AccountID] = None
    comment: Optional[str] = None
    refund: Optional[Refund] = None
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def to_action(self, book=None):
        return Action.new(ActionType.JETTON_TRANSFER, self.success, JettonTransferAction(
            jetton=self.jetton,
            senders_wallet=self.senders_wallet,
            amount=self.amount,
            sender=self.sender,
            recipient=self.recipient,
            recipients_wallet=self.recipients_wallet,
            comment=self.comment,
            refund=self.refund,
            ton_attached=list(self.ton_attached),
        ), book)


def _jetton_master(tx: TxBubble, children: List[Bubble]) -> Optional[AccountID]:
    if tx.additional_info is not None and tx.additional_info.jetton_master is not None:
        return tx.additional_info.jetton_master
    for child in children:
        ctx = tx_of(child)
        if ctx is not None and ctx.operation(abi.JETTON_INTERNAL_TRANSFER_OP) and \
                ctx.additional_info is not None and ctx.additional_info.jetton_master is not None:
            return ctx.additional_info.jetton_master
    return None


def find_jetton_transfer(bubble: Bubble) -> bool:
    """
    Sender's jetton wallet gets ``transfer`` from its owner and sends
    ``internal_transfer`` to the recipient's jetton wallet, which may notify the
    new owner and return excesses. A bounce back to either side becomes the
    transfer's refund. The jetton master comes from additional info; without
    it the transfer is still reported but moves no jettons in the value flow.
    """
    tx = tx_of(bubble)
    if tx is None or not tx.operation(abi.JETTON_TRANSFER_OP) or tx.input_from is None:
        return False
    body = tx.body(JettonTransferMsgBody)
    master = _jetton_master(tx, bubble.children)
    transfer = JettonTransferBubble(
        jetton=master,
        senders_wallet=tx.account.address,
        amount=body.amount if body is not None else 0,
        success=tx.success,
        sender=tx.input_from.address,
        recipient=body.destination if body is not None else None,
        comment=abi.text_comment(body.forward_payload) if body is not None else None,
    )
    recipients_wallet: List[Account] = []

    def absorb_first_hop(child: Bubble) -> bool:
        ctx = tx_of(child)
        if ctx is None or not sent_by(ctx, tx.account):
            return False
        if ctx.operation(abi.JETTON_INTERNAL_TRANSFER_OP) and not recipients_wallet:
            recipients_wallet.append(ctx.account)
            transfer.recipients_wallet = ctx.account.address
            transfer.success = transfer.success and ctx.success
            return True
        if ctx.bounced and ctx.account.address == transfer.sender:
            transfer.refund = classify_refund(tx.account)
            return True
        if ctx.operation(abi.EXCESS_OP):
            transfer.ton_attached.append(HiddenTonValue(account=ctx.account.address, amount=ctx.input_amount))
            return True
        return False

    def absorb_second_hop(child: Bubble) -> bool:
        ctx = tx_of(child)
        if ctx is None or not recipients_wallet or not sent_by(ctx, recipients_wallet[0]):
            return False
        if ctx.operation(abi.JETTON_NOTIFY_OP) and transfer.recipient is None:
            transfer.recipient = ctx.account.address
        if ctx.operation(abi.JETTON_NOTIFY_OP) or ctx.operation(abi.EXCESS_OP):
            transfer.ton_attached.append(HiddenTonValue(account=ctx.account.address, amount=ctx.input_amount))
            return True
        if ctx.bounced and ctx.account.address == tx.account.address:
            # internal_transfer rejected by the recipient's wallet
            transfer.refund = classify_refund(recipients_wallet[0])
            transfer.success = False
            return True
        return False

    children = fold_children(bubble, bubble.children, absorb_first_hop)
    children = fold_children(bubble, children, absorb_second_hop)
    if master is not None and transfer.success and transfer.sender is not None and \
            transfer.recipient is not None:
        bubble.value_flow.add_jettons(transfer.sender, master, -transfer.amount)
        bubble.value_flow.add_jettons(transfer.recipient, master, transfer.amount)
    bubble.add_accounts(transfer.recipient, transfer.recipients_wallet)
    bubble.info = transfer
    bubble.children = children
    return True
