"""Contract deployments."""

from __future__ import annotations

from builders import ALICE, TON, acc, external, node

from tonbath.actions import ActionType
from tonbath.bubble import Bubble, ContractDeployment, from_trace
from tonbath.straws import ContractDeployBubble, EmptyBubble
from tonbath.straws.deploy import find_contract_deploy
from tonbath.summarizer import find_actions
from tonbath.value_flow import ValueFlow

NEW = acc(80)
OTHER = acc(81)


def test_deploy_by_transfer() -> None:
    trace = external(ALICE, children=[node(NEW, ALICE, value=TON, deploy=True, init_interfaces=["wallet"])])
    result = find_actions(trace)

    assert [a.type for a in result.actions] == [ActionType.CONTRACT_DEPLOY, ActionType.TON_TRANSFER]
    deploy, transfer = result.actions
    assert deploy.payload.address == NEW
    assert deploy.payload.interfaces == ["wallet"]
    assert deploy.simple_preview.message_id == "contractDeployAction"
    assert transfer.payload.recipient == NEW
    assert result.value_flow.accounts[NEW].ton == TON


def test_failed_deploy_is_reported_as_failed() -> None:
    trace = external(ALICE, children=[node(NEW, ALICE, value=TON, deploy=True, success=False)])
    deploy = find_actions(trace).actions[0]
    assert deploy.type == ActionType.CONTRACT_DEPLOY
    assert not deploy.success


def test_wrappers_follow_deployment_order() -> None:
    flow = ValueFlow()
    flow.add_tons(ALICE, 5)
    inner_child = from_trace(external(ALICE))
    bubble = Bubble(info=EmptyBubble(), accounts=[ALICE], children=[inner_child], value_flow=flow,
                    contract_deployments={
                        NEW: ContractDeployment(init_interfaces=["wallet"]),
                        OTHER: ContractDeployment(init_interfaces=["nft_item"], success=False),
                    })

    assert find_contract_deploy(bubble)
    assert bubble.contract_deployments == {}
    assert isinstance(bubble.info, ContractDeployBubble)
    assert bubble.info.address == NEW
    assert bubble.accounts == [NEW]

    second = bubble.children[0]
    assert isinstance(second.info, ContractDeployBubble)
    assert second.info.address == OTHER
    assert not second.info.success

    inner = second.children[0]
    assert isinstance(inner.info, EmptyBubble)
    assert inner.children == [inner_child]
    assert inner.value_flow.accounts[ALICE].ton == 5
    assert bubble.value_flow.accounts == {}

    assert not find_contract_deploy(bubble)
