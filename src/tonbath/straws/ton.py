# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from tonbath import abi
from tonbath.actions import Action, ActionType, Refund, SmartContractAction, TonTransferAction
from tonbath.address import AccountID
from tonbath.bubble import Bubble, BubbleInfo
from tonbath.straws.base import classify_refund, tx_of


@dataclass
class TonTransferBubble(BubbleInfo):
    sender: AccountID
    recipient: AccountID
    amount: int
    success: bool = True
    comment: Optional[str] = None
    refund: Optional[Refund] = None

    def to_action(self, book=None):
        return Action.new(ActionType.TON_TRANSFER, self.success, TonTransferAction(
            amount=self.amount,
            recipient=self.recipient,
            sender=self.sender,
            comment=self.comment,
            refund=self.refund,
        ), book)


@dataclass
class SmartContractCallBubble(BubbleInfo):
    executor: AccountID
    contract: AccountID
    ton_attached: int
    operation: str
    payload: str = ""
    success: bool = True
    refund: Optional[Refund] = None

    def to_action(self, book=None):
        return Action.new(ActionType.SMART_CONTRACT_EXEC, self.success, SmartContractAction(
            ton_attached=self.ton_attached,
            executor=self.executor,
            contract=self.contract,
            operation=self.operation,
            payload=self.payload,
            refund=self.refund,
        ), book)


@dataclass
class EmptyBubble(BubbleInfo):
    """A transaction with nothing to show; it still carries value flow and children."""
    success: bool = True

    def to_action(self, book=None):
        return None


def find_bounced_refund(bubble: Bubble) -> bool:
    """
    A bounced message, or a bid handed back by an auction contract, becomes a
    TON transfer marked as a refund from the contract that returned the coins.
    """
    tx = tx_of(bubble)
    if tx is None or tx.input_from is None:
        return False
    if not tx.bounced and tx.op_code not in abi.REFUND_OPS:
        return False
    bubble.info = TonTransferBubble(
        sender=tx.input_from.address,
        recipient=tx.account.address,
        amount=tx.input_amount,
        success=tx.success,
        refund=classify_refund(tx.input_from),
    )
    return True


def find_ton_transfer(bubble: Bubble) -> bool:
    tx = tx_of(bubble)
    if tx is None or tx.external or tx.input_from is None:
        return False
    if not tx.is_plain_transfer():
        return False
    if tx.op_code is None and tx.input_amount == 0 and not bubble.children:
        return False
    bubble.info = TonTransferBubble(
        sender=tx.input_from.address,
        recipient=tx.account.address,
        amount=tx.input_amount,
        success=tx.success,
        comment=abi.text_comment(tx.decoded_body),
    )
    return True


def find_smart_contract_exec(bubble: Bubble) -> bool:
    tx = tx_of(bubble)
    if tx is None or tx.external or tx.input_from is None or tx.is_plain_transfer():
        return False
    bubble.info = SmartContractCallBubble(
        executor=tx.input_from.address,
        contract=tx.account.address,
        ton_attached=tx.input_amount,
        operation=tx.operation_name(),
        payload=tx.payload_str(),
        success=tx.success,
    )
    return True


def find_empty(bubble: Bubble) -> bool:
    """
    External messages, and internal ones that carry neither an opcode nor coins
    and started nothing. Anything else left unrecognized keeps its TxBubble.
    """
    tx = tx_of(bubble)
    if tx is None:
        return False
    if not tx.external and tx.input_from is not None and \
            (tx.op_code is not None or tx.input_amount != 0 or bubble.children):
        return False
    bubble.info = EmptyBubble(success=tx.success)
    return True
