# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from tonbath.address import AccountID

# Standard TON message opcodes (leading 32 bits of a body)
TEXT_COMMENT_OP = 0x00000000
NFT_TRANSFER_OP = 0x5fcc3d14
NFT_OWNERSHIP_ASSIGNED_OP = 0x05138d91
EXCESS_OP = 0xd53276db
JETTON_TRANSFER_OP = 0x0f8a7ea5
JETTON_INTERNAL_TRANSFER_OP = 0x178d4519
JETTON_NOTIFY_OP = 0x7362d09c
OUTBID_NOTIFICATION_OP = 0x557cea20
TELEMINT_DEPLOY_OP = 0x4637289a
TELEITEM_DEPLOY_OP = 0x299a3e15
TELEITEM_RETURN_BID_OP = 0xa43227e1
PAYMENT_REQUEST_OP = 0x706c7567
PAYMENT_REQUEST_RESPONSE_OP = 0xf06c7567
SUBSCRIPTION_PAYMENT_OP = 0x73756273
WALLET_PLUGIN_DESTRUCT_OP = 0x64737472
WALLET_PLUGIN_DESTRUCT_RESPONSE_OP = 0xe4737472
BOUNCE_OP = 0xffffffff

OP_NAMES = {
    TEXT_COMMENT_OP: "TextComment",
    NFT_TRANSFER_OP: "NftTransfer",
    NFT_OWNERSHIP_ASSIGNED_OP: "NftOwnershipAssigned",
    EXCESS_OP: "Excess",
    JETTON_TRANSFER_OP: "JettonTransfer",
    JETTON_INTERNAL_TRANSFER_OP: "JettonInternalTransfer",
    JETTON_NOTIFY_OP: "JettonNotify",
    OUTBID_NOTIFICATION_OP: "OutbidNotification",
    TELEMINT_DEPLOY_OP: "TelemintDeploy",
    TELEITEM_DEPLOY_OP: "TeleitemDeploy",
    TELEITEM_RETURN_BID_OP: "TeleitemReturnBid",
    PAYMENT_REQUEST_OP: "PaymentRequest",
    PAYMENT_REQUEST_RESPONSE_OP: "PaymentRequestResponse",
    SUBSCRIPTION_PAYMENT_OP: "SubscriptionPayment",
    WALLET_PLUGIN_DESTRUCT_OP: "WalletPluginDestruct",
    WALLET_PLUGIN_DESTRUCT_RESPONSE_OP: "WalletPluginDestructResponse",
    BOUNCE_OP: "Bounce",
}

# Ops a contract uses to hand a bid back to the previous bidder
REFUND_OPS = (OUTBID_NOTIFICATION_OP, TELEITEM_RETURN_BID_OP)


class ContractInterface(str, Enum):
    WALLET = "wallet"
    JETTON_WALLET = "jetton_wallet"
    JETTON_MASTER = "jetton_master"
    NFT_ITEM = "nft_item"
    NFT_COLLECTION = "nft_collection"
    NFT_SALE_GETGEMS = "nft_sale_getgems"
    NFT_AUCTION_GETGEMS = "nft_auction_getgems"
    DNS_ITEM = "dns_item"
    TELEITEM = "teleitem"
    TELEMINT_COLLECTION = "telemint_collection"
    SUBSCRIPTION = "subscription_v1"


def interface_names(interfaces) -> List[str]:
    return [i.value if isinstance(i, ContractInterface) else str(i) for i in interfaces]


def op_name(op: Optional[int]) -> str:
    if op is None:
        return ""
    return OP_NAMES.get(op, f"0x{op:08x}")


@dataclass
class DecodedBody:
    """
    Message body already decoded by an ABI layer: a name plus one of the payload
    dataclasses below (or any other value for bodies the summarizer does not inspect).
    """
    name: str
    value: Any = None


@dataclass
class TextCommentMsgBody:
    text: str


@dataclass
class NftTransferMsgBody:
    query_id: int = 0
    new_owner: Optional[AccountID] = None
    response_destination: Optional[AccountID] = None
    forward_amount: int = 0
    forward_payload: Optional[DecodedBody] = None


@dataclass
class NftOwnershipAssignedMsgBody:
    query_id: int = 0
    prev_owner: Optional[AccountID] = None
    forward_payload: Optional[DecodedBody] = None


@dataclass
class JettonTransferMsgBody:
    query_id: int = 0
    amount: int = 0
    destination: Optional[AccountID] = None
    response_destination: Optional[AccountID] = None
    forward_ton_amount: int = 0
    forward_payload: Optional[DecodedBody] = None


@dataclass
class JettonInternalTransferMsgBody:
    query_id: int = 0
    amount: int = 0
    from_: Optional[AccountID] = None
    response_address: Optional[AccountID] = None
    forward_ton_amount: int = 0
    forward_payload: Optional[DecodedBody] = None


@dataclass
class JettonNotifyMsgBody:
    query_id: int = 0
    amount: int = 0
    sender: Optional[AccountID] = None
    forward_payload: Optional[DecodedBody] = None


@dataclass
class ExcessMsgBody:
    query_id: int = 0


def text_comment(body: Optional[DecodedBody]) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body.value, TextCommentMsgBody):
        return body.value.text
    return None
