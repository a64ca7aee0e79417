# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from tonbath import abi
from tonbath.abi import ContractInterface
from tonbath.actions import Action, ActionType, SubscriptionAction, UnSubscriptionAction
from tonbath.address import AccountID
from tonbath.bubble import Bubble, BubbleInfo
from tonbath.straws.base import fold_children, sent_by, tx_of


@dataclass
class SubscriptionBubble(BubbleInfo):
    subscription: AccountID
    subscriber: AccountID
    beneficiary: AccountID
    amount: int
    success: bool = True
    first: bool = False

    def to_action(self, book=None):
        return Action.new(ActionType.SUBSCRIPTION, self.success, SubscriptionAction(
            subscription=self.subscription,
            subscriber=self.subscriber,
            beneficiary=self.beneficiary,
            amount=self.amount,
            first=self.first,
        ), book)


@dataclass
class UnSubscriptionBubble(BubbleInfo):
    subscription: AccountID
    subscriber: AccountID
    beneficiary: Optional[AccountID] = None
    success: bool = True

    def to_action(self, book=None):
        return Action.new(ActionType.UNSUBSCRIPTION, self.success, UnSubscriptionAction(
            subscription=self.subscription,
            subscriber=self.subscriber,
            beneficiary=self.beneficiary,
        ), book)


def _find_payment(bubble: Bubble) -> bool:
    tx = tx_of(bubble)
    if tx is None or tx.input_from is None or not tx.implements(ContractInterface.SUBSCRIPTION):
        return False
    payment_child = None
    for child in bubble.children:
        ctx = tx_of(child)
        if ctx is not None and ctx.operation(abi.SUBSCRIPTION_PAYMENT_OP) and sent_by(ctx, tx.account):
            payment_child = child
            break
    if payment_child is None:
        return False
    first = False
    deployment = bubble.contract_deployments.pop(tx.account.address, None)
    if deployment is not None:
        first = deployment.success
    sub = SubscriptionBubble(
        subscription=tx.account.address,
        subscriber=tx.input_from.address,
        beneficiary=payment_child.info.account.address,
        amount=tx.input_amount,
        success=tx.success and payment_child.info.success,
        first=first,
    )
    children = fold_children(bubble, bubble.children, lambda c: c is payment_child)
    bubble.add_accounts(sub.beneficiary)
    bubble.info = sub
    bubble.children = children
    return True


def _find_payment_request(bubble: Bubble) -> bool:
    # Recurring payment: the plugin asks the wallet, the wallet answers with coins
    tx = tx_of(bubble)
    if tx is None or not tx.operation(abi.PAYMENT_REQUEST_OP) or tx.input_from is None:
        return False
    for child in bubble.children:
        if isinstance(child.info, SubscriptionBubble) and child.info.subscription == tx.input_from.address \
                and child.info.subscriber == tx.account.address:
            sub_child = child
            break
    else:
        return False
    sub: SubscriptionBubble = sub_child.info
    sub.success = sub.success and tx.success
    children = fold_children(bubble, bubble.children, lambda c: c is sub_child)
    bubble.info = sub
    bubble.children = children
    return True


def find_subscription(bubble: Bubble) -> bool:
    """
    Payment from a subscriber's wallet through a subscription plugin to the
    beneficiary. ``first`` is set when the plugin was deployed by this bubble.
    """
    return _find_payment(bubble) or _find_payment_request(bubble)


def find_unsubscription(bubble: Bubble) -> bool:
    tx = tx_of(bubble)
    if tx is None or not tx.operation(abi.WALLET_PLUGIN_DESTRUCT_OP) or tx.input_from is None:
        return False
    info = tx.additional_info.subscription if tx.additional_info is not None else None
    unsub = UnSubscriptionBubble(
        subscription=tx.account.address,
        subscriber=tx.input_from.address,
        beneficiary=info.beneficiary if info is not None else None,
        success=tx.success,
    )

    def absorb(child: Bubble) -> bool:
        ctx = tx_of(child)
        return ctx is not None and sent_by(ctx, tx.account) and ctx.account.address == unsub.subscriber and \
            not ctx.bounced and (ctx.operation(abi.WALLET_PLUGIN_DESTRUCT_RESPONSE_OP) or ctx.is_plain_transfer())

    children = fold_children(bubble, bubble.children, absorb)
    bubble.add_accounts(unsub.beneficiary)
    bubble.info = unsub
    bubble.children = children
    return True
