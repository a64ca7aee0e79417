"""Helpers to assemble Trace trees for the summarizer tests."""

from __future__ import annotations

from typing import List, Optional

from tonbath import abi
from tonbath.abi import DecodedBody
from tonbath.address import AccountID
from tonbath.trace_models import (AccountStatus, ComputePhase, Message, OutMessage, Trace,
                                  TraceAdditionalInfo)

TON = 10 ** 9


def acc(n: int, workchain: int = 0) -> AccountID:
    return AccountID(workchain, bytes([n]) * 32)


ALICE = acc(1)
BOB = acc(2)
CAROL = acc(3)


def comment(text: str) -> DecodedBody:
    return DecodedBody(name="TextComment", value=abi.TextCommentMsgBody(text=text))


def external(account: AccountID, children: Optional[List[Trace]] = None, total_fee: int = 1000,
             interfaces: Optional[List[str]] = None, value: int = 0,
             out_msgs: Optional[List[OutMessage]] = None) -> Trace:
    return Trace(
        account=account,
        account_interfaces=list(interfaces or ["wallet"]),
        in_msg=Message(destination=account, source=None, value=value),
        out_msgs=list(out_msgs or []),
        total_fee=total_fee,
        children=list(children or []),
    )


def node(account: AccountID, source: AccountID, value: int = 0, op: Optional[int] = None,
         body: Optional[DecodedBody] = None, children: Optional[List[Trace]] = None,
         interfaces: Optional[List[str]] = None, success: bool = True, bounced: bool = False,
         total_fee: int = 500, fwd_fee: int = 100, additional_info: Optional[TraceAdditionalInfo] = None,
         init_interfaces: Optional[List[str]] = None, deploy: bool = False, no_state: bool = False,
         out_msgs: Optional[List[OutMessage]] = None) -> Trace:
    """
    Internal-message transaction. ``deploy`` makes the account go from uninit to
    active, ``no_state`` marks the compute phase as skipped for lack of code.
    """
    return Trace(
        account=account,
        success=success,
        account_interfaces=list(interfaces or []),
        compute_phase=ComputePhase(skipped=True, skip_reason="no_state") if no_state else ComputePhase(),
        orig_status=AccountStatus.UNINIT if (deploy or no_state) else AccountStatus.ACTIVE,
        end_status=AccountStatus.UNINIT if no_state else AccountStatus.ACTIVE,
        in_msg=Message(destination=account, source=source, value=value, fwd_fee=fwd_fee, op_code=op,
                       decoded_body=body, bounced=bounced, bounce=not bounced,
                       init_interfaces=list(init_interfaces or [])),
        out_msgs=list(out_msgs or []),
        total_fee=total_fee,
        additional_info=additional_info,
        children=list(children or []),
    )


# Jetton transfer from ALICE to BOB through their jetton wallets
ALICE_WALLET = acc(10)
BOB_WALLET = acc(11)
MASTER = acc(12)
JETTON_AMOUNT = 10 ** 30


def jetton_transfer_body(amount: int = JETTON_AMOUNT, forward_payload=None) -> DecodedBody:
    return DecodedBody(name="JettonTransfer", value=abi.JettonTransferMsgBody(
        amount=amount, destination=BOB, response_destination=ALICE, forward_ton_amount=1,
        forward_payload=forward_payload,
    ))


def jetton_delivered() -> List[Trace]:
    return [
        node(BOB, BOB_WALLET, value=1, op=abi.JETTON_NOTIFY_OP, interfaces=["wallet"]),
        node(ALICE, BOB_WALLET, value=30_000_000, op=abi.EXCESS_OP, interfaces=["wallet"]),
    ]


def jetton_trace(second_hop: List[Trace], internal_success: bool = True, master_on_internal: bool = False,
                 forward_payload=None, master: Optional[AccountID] = MASTER) -> Trace:
    info = TraceAdditionalInfo(jetton_master=master) if master is not None else None
    return external(ALICE, children=[
        node(ALICE_WALLET, ALICE, value=50_000_000, op=abi.JETTON_TRANSFER_OP, interfaces=["jetton_wallet"],
             body=jetton_transfer_body(forward_payload=forward_payload),
             additional_info=None if master_on_internal else info, children=[
                 node(BOB_WALLET, ALICE_WALLET, value=40_000_000, op=abi.JETTON_INTERNAL_TRANSFER_OP,
                      interfaces=["jetton_wallet"], success=internal_success,
                      additional_info=info if master_on_internal else None,
                      children=second_hop),
             ]),
    ])


def toncenter_doc() -> dict:
    """toncenter v3 trace: external to ALICE, which sends 1 TON with a comment to BOB."""
    a = ALICE.to_raw().upper()
    b = BOB.to_raw().upper()
    ok = {"type": "ord", "aborted": False, "compute_ph": {"skipped": False, "success": True, "exit_code": 0}}
    return {
        "trace_id": "trace-1",
        "trace": {"tx_hash": "tx1", "in_msg_hash": "m1", "children": [
            {"tx_hash": "tx2", "in_msg_hash": "m2", "children": []},
        ]},
        "transactions": {
            "tx1": {
                "account": a, "hash": "tx1", "lt": "100", "orig_status": "active", "end_status": "active",
                "total_fees": "1000", "description": ok, "interfaces": ["wallet"],
                "in_msg": {"hash": "m1", "source": None, "destination": a, "value": None, "opcode": None,
                           "message_content": {"hash": "b1", "decoded": None}},
                "out_msgs": [
                    {"hash": "m2", "source": a, "destination": b, "value": "1000000000", "fwd_fee": "100",
                     "opcode": "0x00000000"},
                    {"hash": "m3", "source": a, "destination": None, "value": "0", "fwd_fee": "7",
                     "opcode": None},
                ],
            },
            "tx2": {
                "account": b, "hash": "tx2", "lt": "101", "orig_status": "active", "end_status": "active",
                "total_fees": "500", "description": ok,
                "in_msg": {"hash": "m2", "source": a, "destination": b, "value": "1000000000", "fwd_fee": "100",
                           "bounce": True, "bounced": False, "opcode": "0x00000000",
                           "message_content": {"hash": "b2", "decoded": {"type": "text_comment",
                                                                          "comment": "hello"}}},
                "out_msgs": [],
            },
        },
        "address_book": {
            a: {"user_friendly": ALICE.to_user_friendly(), "domain": "alice.ton"},
            b: {"user_friendly": BOB.to_user_friendly(), "domain": None},
        },
    }
