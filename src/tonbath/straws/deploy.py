# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from tonbath.actions import Action, ActionType, ContractDeployAction
from tonbath.address import AccountID
from tonbath.bubble import Bubble, BubbleInfo


@dataclass
class ContractDeployBubble(BubbleInfo):
    address: AccountID
    interfaces: List[str] = field(default_factory=list)
    success: bool = True

    def to_action(self, book=None):
        return Action.new(ActionType.CONTRACT_DEPLOY, self.success, ContractDeployAction(
            address=self.address,
            interfaces=list(self.interfaces),
        ), book)


def find_contract_deploy(bubble: Bubble) -> bool:
    """
    Deployments no other straw consumed become ContractDeploy bubbles placed
    above the bubble that caused them, one per deployed account.
    """
    if not bubble.contract_deployments:
        return False
    inner = Bubble(
        info=bubble.info,
        accounts=list(bubble.accounts),
        children=bubble.children,
        value_flow=bubble.value_flow,
    )
    # innermost first so the outermost wrapper is the first deployment
    for account, deployment in reversed(list(bubble.contract_deployments.items())):
        inner = Bubble(
            info=ContractDeployBubble(address=account, interfaces=list(deployment.init_interfaces),
                                      success=deployment.success),
            accounts=[account],
            children=[inner],
        )
    bubble.info = inner.info
    bubble.accounts = inner.accounts
    bubble.children = inner.children
    bubble.value_flow = inner.value_flow
    bubble.contract_deployments = {}
    return True
