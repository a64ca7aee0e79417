# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from tonbath.actions import Action, collect_actions_and_value_flow
from tonbath.address import AccountID
from tonbath.address_book import AddressBook
from tonbath.bubble import from_trace
from tonbath.merger import merge_all
from tonbath.straws import Straw
from tonbath.trace_models import Trace
from tonbath.value_flow import ValueFlow


@dataclass
class ActionsList:
    actions: List[Action]
    value_flow: ValueFlow

    def extra(self, account: AccountID) -> int:
        """
        Net native coin change of ``account`` plus the coins it gets back
        through messages hidden inside jetton and NFT transfers.
        """
        flow = self.value_flow.accounts.get(account)
        extra = flow.ton if flow is not None else 0
        for action in self.actions:
            extra = action.contribute_to_extra(account, extra)
        return extra

    def to_dict(self) -> Dict[str, Any]:
        return {
            'actions': [a.to_dict() for a in self.actions],
            'value_flow': self.value_flow.to_dict(),
        }


def find_actions(trace: Trace, for_account: Optional[AccountID] = None, book: Optional[AddressBook] = None,
                 straws: Optional[Sequence[Straw]] = None) -> ActionsList:
    """
    Summarize a trace: adapt it to bubbles, merge them with the straws and
    collect the resulting actions and value flow.
    """
    bubble = merge_all(from_trace(trace), straws)
    actions, value_flow = collect_actions_and_value_flow(bubble, for_account, book)
    return ActionsList(actions=actions, value_flow=value_flow)
