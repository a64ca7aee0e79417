"""Jetton transfers."""

from __future__ import annotations

from builders import (ALICE, ALICE_WALLET, BOB, BOB_WALLET, CAROL, JETTON_AMOUNT as AMOUNT, MASTER, comment,
                      external, jetton_delivered as _delivered, jetton_trace, node)

from tonbath import abi
from tonbath.actions import ActionType, RefundType
from tonbath.summarizer import find_actions


def test_jetton_transfer_collapses_to_one_action() -> None:
    result = find_actions(jetton_trace(_delivered()))
    assert [a.type for a in result.actions] == [ActionType.JETTON_TRANSFER]

    action = result.actions[0]
    assert action.success
    p = action.payload
    assert p.jetton == MASTER
    assert p.senders_wallet == ALICE_WALLET
    assert p.recipients_wallet == BOB_WALLET
    assert p.sender == ALICE
    assert p.recipient == BOB
    assert p.amount == AMOUNT
    assert p.refund is None
    assert [(v.account, v.amount) for v in p.ton_attached] == [(BOB, 1), (ALICE, 30_000_000)]

    flow = result.value_flow.accounts
    assert flow[ALICE].jettons == {MASTER: -AMOUNT}
    assert flow[BOB].jettons == {MASTER: AMOUNT}
    assert flow[ALICE].ton == -20_000_000


def test_hidden_excess_counts_towards_extra() -> None:
    result = find_actions(jetton_trace(_delivered()))
    assert result.extra(ALICE) == -20_000_000 + 30_000_000
    assert result.extra(BOB) == 1 + 1
    assert result.extra(CAROL) == 0


def test_amount_survives_json_as_string() -> None:
    d = find_actions(jetton_trace(_delivered())).actions[0].to_dict()
    assert d['type'] == "JettonTransfer"
    assert d['JettonTransfer']['amount'] == str(AMOUNT)


def test_master_from_internal_transfer() -> None:
    result = find_actions(jetton_trace(_delivered(), master_on_internal=True))
    assert result.actions[0].payload.jetton == MASTER


def test_forward_comment() -> None:
    result = find_actions(jetton_trace(_delivered(), forward_payload=comment("for coffee")))
    assert result.actions[0].payload.comment == "for coffee"


def test_rejected_internal_transfer_is_refunded() -> None:
    bounce = [node(ALICE_WALLET, BOB_WALLET, value=39_000_000, bounced=True, op=abi.BOUNCE_OP,
                   interfaces=["jetton_wallet"])]
    result = find_actions(jetton_trace(bounce, internal_success=False))

    assert [a.type for a in result.actions] == [ActionType.JETTON_TRANSFER]
    action = result.actions[0]
    assert not action.success
    assert action.payload.refund.type == RefundType.UNKNOWN
    assert action.payload.refund.origin == BOB_WALLET.to_raw()
    assert result.value_flow.accounts[ALICE].jettons == {}
    assert BOB not in result.value_flow.accounts


def test_transfer_without_master_moves_no_jettons() -> None:
    result = find_actions(jetton_trace(_delivered(), master=None))
    assert [a.type for a in result.actions] == [ActionType.JETTON_TRANSFER]

    p = result.actions[0].payload
    assert p.jetton is None
    assert p.sender == ALICE
    assert p.recipient == BOB
    assert p.recipients_wallet == BOB_WALLET
    assert p.amount == AMOUNT
    assert result.actions[0].to_dict()['JettonTransfer']['jetton'] is None

    flow = result.value_flow.accounts
    assert flow[ALICE].jettons == {}
    assert flow[BOB].jettons == {}
    assert flow[ALICE].ton == -20_000_000


def test_transfer_recognized_by_opcode_alone() -> None:
    trace = external(ALICE, children=[
        node(ALICE_WALLET, ALICE, value=50_000_000, op=abi.JETTON_TRANSFER_OP),
    ])
    result = find_actions(trace)
    assert [a.type for a in result.actions] == [ActionType.JETTON_TRANSFER]
    p = result.actions[0].payload
    assert p.senders_wallet == ALICE_WALLET
    assert p.recipient is None
    assert p.amount == 0


def test_notification_to_someone_else_stays_separate() -> None:
    second_hop = _delivered() + [node(CAROL, ALICE, value=5)]
    result = find_actions(jetton_trace(second_hop))
    assert [a.type for a in result.actions] == [ActionType.JETTON_TRANSFER, ActionType.TON_TRANSFER]
