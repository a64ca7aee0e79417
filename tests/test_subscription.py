"""Wallet plugin subscriptions."""

from __future__ import annotations

from builders import ALICE, TON, acc, external, node

from tonbath import abi
from tonbath.actions import ActionType
from tonbath.summarizer import find_actions
from tonbath.trace_models import SubscriptionInfo, TraceAdditionalInfo

PLUGIN = acc(40)
BENEFICIARY = acc(41)


def test_first_payment_deploys_plugin() -> None:
    trace = external(ALICE, children=[
        node(PLUGIN, ALICE, value=TON, deploy=True, init_interfaces=["subscription_v1"], children=[
            node(BENEFICIARY, PLUGIN, value=TON - 10_000_000, op=abi.SUBSCRIPTION_PAYMENT_OP),
        ]),
    ])
    result = find_actions(trace)

    assert [a.type for a in result.actions] == [ActionType.SUBSCRIPTION]
    action = result.actions[0]
    p = action.payload
    assert p.subscription == PLUGIN
    assert p.subscriber == ALICE
    assert p.beneficiary == BENEFICIARY
    assert p.amount == TON
    assert p.first
    assert action.simple_preview.message_id == "subscriptionFirstAction"


def test_recurring_payment_requested_by_plugin() -> None:
    trace = external(PLUGIN, interfaces=["subscription_v1"], children=[
        node(ALICE, PLUGIN, value=50_000_000, op=abi.PAYMENT_REQUEST_OP, interfaces=["wallet"], children=[
            node(PLUGIN, ALICE, value=TON, op=abi.PAYMENT_REQUEST_RESPONSE_OP, interfaces=["subscription_v1"],
                 children=[
                     node(BENEFICIARY, PLUGIN, value=TON - 10_000_000, op=abi.SUBSCRIPTION_PAYMENT_OP),
                 ]),
        ]),
    ])
    result = find_actions(trace)

    assert [a.type for a in result.actions] == [ActionType.SUBSCRIPTION]
    p = result.actions[0].payload
    assert p.subscriber == ALICE
    assert p.beneficiary == BENEFICIARY
    assert not p.first
    assert result.actions[0].simple_preview.message_id == "subscriptionAction"


def test_unsubscribe() -> None:
    info = TraceAdditionalInfo(subscription=SubscriptionInfo(wallet=ALICE, beneficiary=BENEFICIARY, amount=TON))
    trace = external(ALICE, children=[
        node(PLUGIN, ALICE, value=50_000_000, op=abi.WALLET_PLUGIN_DESTRUCT_OP, interfaces=["subscription_v1"],
             additional_info=info, children=[
                 node(ALICE, PLUGIN, value=40_000_000, op=abi.WALLET_PLUGIN_DESTRUCT_RESPONSE_OP),
             ]),
    ])
    result = find_actions(trace)

    assert [a.type for a in result.actions] == [ActionType.UNSUBSCRIPTION]
    p = result.actions[0].payload
    assert p.subscription == PLUGIN
    assert p.subscriber == ALICE
    assert p.beneficiary == BENEFICIARY
    assert result.actions[0].to_dict()['type'] == "UnSubscribe"


def test_unsubscribe_without_plugin_data() -> None:
    trace = external(ALICE, children=[
        node(PLUGIN, ALICE, value=50_000_000, op=abi.WALLET_PLUGIN_DESTRUCT_OP, interfaces=["subscription_v1"]),
    ])
    p = find_actions(trace).actions[0].payload
    assert p.beneficiary is None


def test_payment_through_deployed_plugin_is_not_first() -> None:
    trace = external(ALICE, children=[
        node(PLUGIN, ALICE, value=TON, interfaces=["subscription_v1"], children=[
            node(BENEFICIARY, PLUGIN, value=TON - 10_000_000, op=abi.SUBSCRIPTION_PAYMENT_OP),
        ]),
    ])
    result = find_actions(trace)
    assert [a.type for a in result.actions] == [ActionType.SUBSCRIPTION]
    assert not result.actions[0].payload.first
