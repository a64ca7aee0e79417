"""Trace to bubble adapter."""

from __future__ import annotations

from builders import ALICE, BOB, CAROL, TON, acc, comment, external, node

from tonbath import abi
from tonbath.bubble import TxBubble, from_trace
from tonbath.trace_models import ComputePhase, OutMessage, Trace, TxType


def test_root_external_tx() -> None:
    b = from_trace(external(ALICE, value=5))
    assert isinstance(b.info, TxBubble)
    assert b.info.external
    assert b.info.input_from is None
    assert b.accounts == [ALICE]
    assert b.value_flow.accounts[ALICE].ton == 5


def test_value_flow_debits_children_and_counts_forward_fees() -> None:
    trace = external(ALICE, total_fee=1000, children=[node(BOB, ALICE, value=TON, fwd_fee=100, total_fee=500)])
    b = from_trace(trace)
    assert b.value_flow.accounts[ALICE].ton == -TON
    assert b.value_flow.accounts[ALICE].fees == 1100

    child = b.children[0]
    assert child.accounts == [BOB, ALICE]
    assert child.value_flow.accounts[BOB].ton == TON
    assert child.value_flow.accounts[BOB].fees == 500


def test_out_messages_without_transactions_are_debited() -> None:
    trace = external(ALICE, total_fee=10, out_msgs=[OutMessage(destination=None, value=7, fwd_fee=3)])
    flow = from_trace(trace).value_flow.accounts[ALICE]
    assert flow.ton == -7
    assert flow.fees == 13


def test_sender_interfaces_come_from_parent() -> None:
    teleitem = acc(30)
    trace = external(teleitem, interfaces=["teleitem"], children=[node(BOB, teleitem, value=1)])
    child = from_trace(trace).children[0].info
    assert child.input_from.address == teleitem
    assert child.input_from.interfaces == ["teleitem"]


def test_interface_enums_become_plain_names() -> None:
    trace = external(ALICE, interfaces=[abi.ContractInterface.WALLET])
    assert from_trace(trace).info.account.interfaces == ["wallet"]


def test_message_fields_are_copied() -> None:
    trace = external(ALICE, children=[node(BOB, ALICE, value=3, op=abi.TEXT_COMMENT_OP, body=comment("hi"),
                                           bounced=True)])
    tx = from_trace(trace).children[0].info
    assert tx.input_amount == 3
    assert tx.op_code == abi.TEXT_COMMENT_OP
    assert tx.bounced and not tx.bounce
    assert abi.text_comment(tx.decoded_body) == "hi"
    assert tx.is_plain_transfer()


def test_deployment_is_recorded() -> None:
    trace = external(ALICE, children=[node(CAROL, ALICE, value=TON, deploy=True, init_interfaces=["wallet"])])
    child = from_trace(trace).children[0]
    deployment = child.contract_deployments[CAROL]
    assert deployment.init_interfaces == ["wallet"]
    assert deployment.success
    assert child.info.implements("wallet")


def test_account_without_state_is_not_active() -> None:
    trace = external(ALICE, children=[node(CAROL, ALICE, value=TON, op=0x12345678, no_state=True)])
    child = from_trace(trace).children[0]
    assert not child.info.account_was_active_at_computing_time
    assert child.info.is_plain_transfer()
    assert child.contract_deployments == {}


def test_tick_tock_is_always_active() -> None:
    trace = Trace(account=acc(99, workchain=-1), tx_type=TxType.TICK_TOCK,
                  compute_phase=ComputePhase(skipped=True, skip_reason="no_state"))
    tx = from_trace(trace).info
    assert tx.transaction_type == TxType.TICK_TOCK
    assert tx.account_was_active_at_computing_time
    assert tx.external
