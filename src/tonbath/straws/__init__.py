# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from typing import Dict, Iterable, List

from tonbath.straws.auction import AuctionBidBubble, find_auction_bid, find_tg_auction_init_bid
from tonbath.straws.base import Straw
from tonbath.straws.deploy import ContractDeployBubble, find_contract_deploy
from tonbath.straws.jetton import JettonTransferBubble, find_jetton_transfer
from tonbath.straws.nft import (GetGemsNftPurchaseBubble, NftTransferBubble, find_getgems_nft_purchase,
                                find_nft_transfer)
from tonbath.straws.subscription import (SubscriptionBubble, UnSubscriptionBubble, find_subscription,
                                         find_unsubscription)
from tonbath.straws.ton import (EmptyBubble, SmartContractCallBubble, TonTransferBubble, find_bounced_refund,
                                find_empty, find_smart_contract_exec, find_ton_transfer)

# Most specific first; the last three are catch-alls
DEFAULT_STRAWS: List[Straw] = [
    Straw("jetton_transfer", find_jetton_transfer),
    Straw("nft_transfer", find_nft_transfer),
    Straw("getgems_nft_purchase", find_getgems_nft_purchase),
    Straw("auction_bid", find_auction_bid),
    Straw("tg_auction_init_bid", find_tg_auction_init_bid),
    Straw("subscription", find_subscription),
    Straw("unsubscription", find_unsubscription),
    Straw("bounced_refund", find_bounced_refund),
    Straw("contract_deploy", find_contract_deploy),
    Straw("ton_transfer", find_ton_transfer),
    Straw("smart_contract_exec", find_smart_contract_exec),
    Straw("empty", find_empty),
]


def by_name() -> Dict[str, Straw]:
    return {s.name: s for s in DEFAULT_STRAWS}


def select(disabled: Iterable[str] = ()) -> List[Straw]:
    """
    Default straws minus the disabled ones, priority order preserved.
    """
    disabled = set(disabled)
    unknown = disabled - set(by_name())
    if unknown:
        raise ValueError(f"unknown straws: {', '.join(sorted(unknown))}")
    return [s for s in DEFAULT_STRAWS if s.name not in disabled]


__all__ = [
    "Straw", "DEFAULT_STRAWS", "by_name", "select",
    "AuctionBidBubble", "ContractDeployBubble", "EmptyBubble", "GetGemsNftPurchaseBubble", "JettonTransferBubble",
    "NftTransferBubble", "SmartContractCallBubble", "SubscriptionBubble", "TonTransferBubble",
    "UnSubscriptionBubble",
]
