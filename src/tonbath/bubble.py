# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tonbath import abi
from tonbath.abi import DecodedBody
from tonbath.actions import Action, ActionType, SmartContractAction, TonTransferAction
from tonbath.address import AccountID
from tonbath.address_book import AddressBook
from tonbath.trace_models import (AccountStatus, SKIP_REASON_NO_STATE, Trace, TraceAdditionalInfo,
                                  TxType)
from tonbath.utils import make_json_dumpable
from tonbath.value_flow import ValueFlow


@dataclass
class Account:
    address: AccountID
    interfaces: List[str] = field(default_factory=list)

    def implements(self, *interfaces: str) -> bool:
        return any(i in self.interfaces for i in interfaces)


@dataclass
class ContractDeployment:
    """Initialization of a contract: interfaces of the state-init code and whether the tx succeeded."""
    init_interfaces: List[str] = field(default_factory=list)
    success: bool = True


class BubbleInfo:
    """
    Base of the bubble info variants. A variant knows how to present itself as an
    action; ``None`` means the bubble contributes value flow only.
    """

    def to_action(self, book: Optional[AddressBook] = None) -> Optional[Action]:
        raise NotImplementedError

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass
class TxBubble(BubbleInfo):
    """
    A single transaction as produced by the trace adapter, before any straw
    recognized it as part of a higher level action.
    """
    success: bool
    transaction_type: TxType
    account: Account
    external: bool
    account_was_active_at_computing_time: bool
    input_amount: int = 0
    input_from: Optional[Account] = None
    bounce: bool = False
    bounced: bool = False
    op_code: Optional[int] = None
    decoded_body: Optional[DecodedBody] = None
    init: Optional[bytes] = None
    init_interfaces: List[str] = field(default_factory=list)
    additional_info: Optional[TraceAdditionalInfo] = None

    def operation(self, op: int) -> bool:
        return self.op_code is not None and self.op_code == op

    def body(self, cls):
        """Decoded payload if it is an instance of ``cls``."""
        if self.decoded_body is not None and isinstance(self.decoded_body.value, cls):
            return self.decoded_body.value
        return None

    def implements(self, *interfaces: str) -> bool:
        return self.account.implements(*interfaces) or any(i in self.init_interfaces for i in interfaces)

    def is_plain_transfer(self) -> bool:
        """No opcode, a text comment, or a message to an account without code."""
        return self.op_code is None or self.op_code == abi.TEXT_COMMENT_OP or \
            not self.account_was_active_at_computing_time

    def operation_name(self) -> str:
        if self.decoded_body is not None:
            return self.decoded_body.name
        return abi.op_name(self.op_code)

    def payload_str(self) -> str:
        if self.decoded_body is None or self.decoded_body.value is None:
            return ""
        return json.dumps(make_json_dumpable(self.decoded_body.value), sort_keys=True)

    def to_action(self, book=None):
        if self.external or self.input_from is None:
            return None
        if not self.is_plain_transfer() and not self.bounced:
            return Action.new(ActionType.SMART_CONTRACT_EXEC, self.success, SmartContractAction(
                ton_attached=self.input_amount,
                executor=self.input_from.address,
                contract=self.account.address,
                operation=self.operation_name(),
                payload=self.payload_str(),
            ), book)
        return Action.new(ActionType.TON_TRANSFER, self.success, TonTransferAction(
            amount=self.input_amount,
            recipient=self.account.address,
            sender=self.input_from.address,
            comment=abi.text_comment(self.decoded_body),
        ), book)


@dataclass
class Bubble:
    """
    Node of the working tree. Starts as one transaction; straws rewrite it in
    place and fold recognized descendants into it.
    """
    info: BubbleInfo
    accounts: List[AccountID] = field(default_factory=list)
    children: List["Bubble"] = field(default_factory=list)
    value_flow: ValueFlow = field(default_factory=ValueFlow)
    contract_deployments: Dict[AccountID, ContractDeployment] = field(default_factory=dict)

    def add_accounts(self, *accounts: Optional[AccountID]) -> None:
        for a in accounts:
            if a is not None and a not in self.accounts:
                self.accounts.append(a)

    def merge_contract_deployments(self, other: "Bubble") -> None:
        for account, deployment in other.contract_deployments.items():
            self.contract_deployments[account] = deployment

    def absorb(self, other: "Bubble") -> List["Bubble"]:
        """
        Fold ``other`` into this bubble (accounts, value flow, deployments) and
        return its children, which the caller re-attaches where ``other`` was.
        """
        self.add_accounts(*other.accounts)
        self.value_flow.merge(other.value_flow)
        self.merge_contract_deployments(other)
        return list(other.children)

    def walk(self) -> Iterable["Bubble"]:
        yield self
        for c in self.children:
            yield from c.walk()


def from_trace(trace: Trace) -> Bubble:
    """
    Convert a trace tree into the initial bubble tree, one TxBubble per transaction.
    """
    return _from_trace(trace, None)


def _from_trace(trace: Trace, parent: Optional[Trace]) -> Bubble:
    btx = TxBubble(
        success=trace.success,
        transaction_type=trace.tx_type,
        account=Account(address=trace.account, interfaces=abi.interface_names(trace.account_interfaces)),
        external=trace.in_msg is None or trace.in_msg.is_external,
        account_was_active_at_computing_time=(trace.tx_type != TxType.ORDINARY or trace.compute_phase is None or
                                              trace.compute_phase.skip_reason != SKIP_REASON_NO_STATE),
        additional_info=trace.additional_info,
    )
    accounts = [trace.account]
    input_amount = 0
    init_interfaces: List[str] = []
    msg = trace.in_msg
    if msg is not None:
        if msg.source is not None:
            # The sender's interfaces are known only when it is the parent transaction's account
            source_interfaces = abi.interface_names(parent.account_interfaces) if parent is not None and \
                parent.account == msg.source else []
            btx.input_from = Account(address=msg.source, interfaces=source_interfaces)
            if msg.source not in accounts:
                accounts.append(msg.source)
        btx.bounce = msg.bounce
        btx.bounced = msg.bounced
        btx.input_amount = msg.value
        input_amount = msg.value
        btx.op_code = msg.op_code
        btx.decoded_body = msg.decoded_body
        btx.init = msg.init
        btx.init_interfaces = abi.interface_names(msg.init_interfaces)
        init_interfaces = list(btx.init_interfaces)

    value_flow = ValueFlow()
    value_flow.add_tons(trace.account, input_amount)
    b = Bubble(info=btx, accounts=accounts, children=[], value_flow=value_flow)

    if trace.end_status == AccountStatus.ACTIVE and trace.orig_status != AccountStatus.ACTIVE:
        b.contract_deployments[trace.account] = ContractDeployment(init_interfaces=init_interfaces,
                                                                   success=btx.success)

    aggregated_fee = trace.total_fee
    for out_msg in trace.out_msgs:
        value_flow.add_tons(trace.account, -out_msg.value)
        aggregated_fee += out_msg.fwd_fee
    for child in trace.children:
        if child.in_msg is not None:
            # Outbound messages that started a child are not listed in out_msgs
            value_flow.add_tons(trace.account, -child.in_msg.value)
            aggregated_fee += child.in_msg.fwd_fee
        b.children.append(_from_trace(child, trace))
    value_flow.set_fees(trace.account, aggregated_fee)
    return b
