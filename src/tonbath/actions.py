# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from tonbath.address import AccountID
from tonbath.address_book import AUCTION_UNKNOWN, AddressBook
from tonbath.trace_models import NftItem
from tonbath.utils import format_ton, make_json_dumpable
from tonbath.value_flow import ValueFlow

if TYPE_CHECKING:
    from tonbath.bubble import Bubble


class ActionType(str, Enum):
    EMPTY = "Empty"
    TON_TRANSFER = "TonTransfer"
    SMART_CONTRACT_EXEC = "SmartContractExec"
    NFT_ITEM_TRANSFER = "NftItemTransfer"
    GETGEMS_NFT_PURCHASE = "GetGemsNftPurchase"
    JETTON_TRANSFER = "JettonTransfer"
    CONTRACT_DEPLOY = "ContractDeploy"
    SUBSCRIPTION = "Subscription"
    UNSUBSCRIPTION = "UnSubscribe"
    AUCTION_BID = "AuctionBid"
    AUCTION_TG_INIT_BID = "AuctionTgInitBid"


class RefundType(str, Enum):
    DNS_TG = "DNS.tg"
    DNS_TON = "DNS.ton"
    GETGEMS = "GetGems"
    UNKNOWN = "unknown"


@dataclass
class Refund:
    type: RefundType
    origin: str


@dataclass
class HiddenTonValue:
    """Native coin received by an account through messages folded into an action."""
    account: AccountID
    amount: int


@dataclass
class SimplePreview:
    """Short human summary of an action; message_id refers to an i18n template."""
    name: str
    value: str = ""
    accounts: List[AccountID] = field(default_factory=list)
    message_id: str = ""
    template_data: Dict[str, Any] = field(default_factory=dict)


def get_total_hidden_amount(account: AccountID, values: List[HiddenTonValue]) -> int:
    return sum(v.amount for v in values if v.account == account)


def account_name(book: Optional[AddressBook], account: Optional[AccountID]) -> str:
    if account is None:
        return ""
    info = book.resolve(account) if book is not None else None
    if info is not None and info.name and not info.is_scam:
        return info.name
    return account.short()


def _present(*accounts: Optional[AccountID]) -> List[AccountID]:
    result: List[AccountID] = []
    for a in accounts:
        if a is not None and a not in result:
            result.append(a)
    return result


class ActionPayload:
    """
    Common behaviour of action variants. ``contribute_to_extra`` is used to
    estimate what an account really pays before a message is sent.
    """

    def contribute_to_extra(self, account: AccountID, extra: int) -> int:
        return extra

    def preview(self, book: Optional[AddressBook]) -> SimplePreview:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return make_json_dumpable(self)


@dataclass
class TonTransferAction(ActionPayload):
    amount: int
    recipient: AccountID
    sender: AccountID
    comment: Optional[str] = None
    refund: Optional[Refund] = None

    def preview(self, book):
        value = format_ton(self.amount)
        return SimplePreview(
            name="Ton Transfer",
            value=value,
            accounts=_present(self.sender, self.recipient),
            message_id="tonTransferAction",
            template_data={'Value': value, 'Recipient': account_name(book, self.recipient)},
        )


@dataclass
class SmartContractAction(ActionPayload):
    ton_attached: int
    executor: AccountID
    contract: AccountID
    operation: str
    payload: str = ""
    refund: Optional[Refund] = None

    def preview(self, book):
        return SimplePreview(
            name="Smart Contract Execution",
            value=format_ton(self.ton_attached),
            accounts=_present(self.executor, self.contract),
            message_id="smartContractExecAction",
            template_data={'Operation': self.operation, 'Contract': account_name(book, self.contract)},
        )


@dataclass
class NftTransferAction(ActionPayload):
    nft: AccountID
    sender: Optional[AccountID] = None
    recipient: Optional[AccountID] = None
    comment: Optional[str] = None
    refund: Optional[Refund] = None
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def contribute_to_extra(self, account, extra):
        return extra + get_total_hidden_amount(account, self.ton_attached)

    def preview(self, book):
        return SimplePreview(
            name="NFT Transfer",
            value="1 NFT",
            accounts=_present(self.sender, self.recipient, self.nft),
            message_id="nftTransferAction",
            template_data={'Recipient': account_name(book, self.recipient), 'Nft': account_name(book, self.nft)},
        )


@dataclass
class GetGemsNftPurchaseAction(ActionPayload):
    nft: AccountID
    new_owner: AccountID
    seller: Optional[AccountID] = None
    price: int = 0
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def preview(self, book):
        return SimplePreview(
            name="NFT Purchase",
            value=format_ton(self.price),
            accounts=_present(self.new_owner, self.seller, self.nft),
            message_id="getGemsNftPurchaseAction",
            template_data={'Price': format_ton(self.price), 'Nft': account_name(book, self.nft)},
        )


@dataclass
class JettonTransferAction(ActionPayload):
    jetton: Optional[AccountID]
    senders_wallet: AccountID
    amount: int
    sender: Optional[AccountID] = None
    recipient: Optional[AccountID] = None
    recipients_wallet: Optional[AccountID] = None
    comment: Optional[str] = None
    refund: Optional[Refund] = None
    ton_attached: List[HiddenTonValue] = field(default_factory=list)

    def contribute_to_extra(self, account, extra):
        return extra + get_total_hidden_amount(account, self.ton_attached)

    def preview(self, book):
        value = f"{self.amount} {account_name(book, self.jetton)}".rstrip()
        return SimplePreview(
            name="Jetton Transfer",
            value=value,
            accounts=_present(self.sender, self.recipient, self.jetton),
            message_id="jettonTransferAction",
            template_data={'Value': value, 'Recipient': account_name(book, self.recipient)},
        )

    def to_dict(self):
        d = make_json_dumpable(self)
        d['amount'] = str(self.amount)
        return d


@dataclass
class ContractDeployAction(ActionPayload):
    address: AccountID
    interfaces: List[str] = field(default_factory=list)

    def preview(self, book):
        return SimplePreview(
            name="Contract Deploy",
            value=", ".join(self.interfaces),
            accounts=[self.address],
            message_id="contractDeployAction",
            template_data={'Address': account_name(book, self.address), 'Interfaces': list(self.interfaces)},
        )


@dataclass
class SubscriptionAction(ActionPayload):
    subscription: AccountID
    subscriber: AccountID
    beneficiary: AccountID
    amount: int
    first: bool = False

    def preview(self, book):
        value = format_ton(self.amount)
        return SimplePreview(
            name="Subscription",
            value=value,
            accounts=_present(self.subscriber, self.beneficiary, self.subscription),
            message_id="subscriptionAction" if not self.first else "subscriptionFirstAction",
            template_data={'Value': value, 'Beneficiary': account_name(book, self.beneficiary)},
        )


@dataclass
class UnSubscriptionAction(ActionPayload):
    subscription: AccountID
    subscriber: AccountID
    beneficiary: Optional[AccountID] = None

    def preview(self, book):
        return SimplePreview(
            name="Unsubscription",
            accounts=_present(self.subscriber, self.beneficiary, self.subscription),
            message_id="unsubscriptionAction",
            template_data={'Beneficiary': account_name(book, self.beneficiary)},
        )


@dataclass
class AuctionBidAction(ActionPayload):
    bidder: AccountID
    bid: int
    auction: AccountID
    previous_bidder: Optional[AccountID] = None
    item: Optional[NftItem] = None
    auction_type: str = AUCTION_UNKNOWN

    def preview(self, book):
        value = format_ton(self.bid)
        return SimplePreview(
            name="Auction bid",
            value=value,
            accounts=_present(self.bidder, self.auction),
            message_id="auctionBidMessage",
            template_data={'Bid': value, 'AuctionType': self.auction_type},
        )


@dataclass
class Action:
    type: ActionType
    success: bool
    payload: ActionPayload
    simple_preview: SimplePreview

    @classmethod
    def new(cls, type_: ActionType, success: bool, payload: ActionPayload,
            book: Optional[AddressBook]) -> "Action":
        return cls(type=type_, success=success, payload=payload, simple_preview=payload.preview(book))

    def contribute_to_extra(self, account: AccountID, extra: int) -> int:
        return self.payload.contribute_to_extra(account, extra)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'success': self.success,
            self.type.value: self.payload.to_dict(),
            'simple_preview': make_json_dumpable(self.simple_preview),
        }

    def __str__(self) -> str:
        return f"{self.type.value}: {self.payload.to_dict()}"


def collect_actions_and_value_flow(bubble: "Bubble", for_account: Optional[AccountID] = None,
                                   book: Optional[AddressBook] = None) -> Tuple[List[Action], ValueFlow]:
    """
    Walk a merged bubble tree depth-first, left to right. A bubble's own action
    precedes the actions of its descendants; value flows are folded after the
    children. With ``for_account`` set only bubbles touching it emit actions,
    while the value flow always covers the whole tree.
    """
    actions: List[Action] = []
    value_flow = ValueFlow()
    if for_account is None or for_account in bubble.accounts:
        a = bubble.info.to_action(book)
        if a is not None:
            actions.append(a)
    for child in bubble.children:
        child_actions, child_value_flow = collect_actions_and_value_flow(child, for_account, book)
        actions.extend(child_actions)
        value_flow.merge(child_value_flow)
    value_flow.merge(bubble.value_flow)
    return actions, value_flow
