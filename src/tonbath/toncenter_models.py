# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
"""
Loader for traces in the toncenter v3 ``/traces`` JSON shape.

A trace document holds a ``trace`` tree of ``{tx_hash, in_msg_hash, children}``
nodes and a ``transactions`` map keyed by base64 tx hash. Besides the standard
fields the loader honours three optional keys an enriching indexer may add:
``interfaces`` on a transaction, ``init_interfaces`` on a message and
``additional_info`` on a transaction.
"""
from __future__ import annotations
import base64
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from tonbath import abi
from tonbath.abi import DecodedBody
from tonbath.address import AccountID
from tonbath.address_book import AccountInfo, StaticAddressBook
from tonbath.errors import TraceFormatError
from tonbath.trace_models import (AccountStatus, ComputePhase, Message, NftItem, NftSaleContract, OutMessage,
                                  SubscriptionInfo, Trace, TraceAdditionalInfo, TxType)
from tonbath.utils import parse_int, parse_opcode


def _account(value: Any, what: str) -> AccountID:
    try:
        return AccountID.parse(value)
    except ValueError as e:
        raise TraceFormatError(f"{what}: {e}") from e


def _opt_account(value: Any, what: str) -> Optional[AccountID]:
    if value is None or value == '':
        return None
    return _account(value, what)


def _int(value: Any, what: str) -> int:
    try:
        return parse_int(value)
    except (TypeError, ValueError) as e:
        raise TraceFormatError(f"{what}: not an integer: {value!r}") from e


def _status(value: Any) -> AccountStatus:
    try:
        return AccountStatus(value)
    except ValueError as e:
        raise TraceFormatError(f"unknown account status {value!r}") from e


# Decoded bodies: toncenter type -> builder of the payload dataclass
_BODY_DECODERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    'text_comment': lambda d: abi.TextCommentMsgBody(text=d.get('comment') or ''),
    'nft_transfer': lambda d: abi.NftTransferMsgBody(
        query_id=_int(d.get('query_id'), 'query_id'),
        new_owner=_opt_account(d.get('new_owner'), 'new_owner'),
        response_destination=_opt_account(d.get('response_destination'), 'response_destination'),
        forward_amount=_int(d.get('forward_amount'), 'forward_amount'),
    ),
    'nft_ownership_assigned': lambda d: abi.NftOwnershipAssignedMsgBody(
        query_id=_int(d.get('query_id'), 'query_id'),
        prev_owner=_opt_account(d.get('prev_owner'), 'prev_owner'),
    ),
    'jetton_transfer': lambda d: abi.JettonTransferMsgBody(
        query_id=_int(d.get('query_id'), 'query_id'),
        amount=_int(d.get('amount'), 'amount'),
        destination=_opt_account(d.get('destination'), 'destination'),
        response_destination=_opt_account(d.get('response_destination'), 'response_destination'),
        forward_ton_amount=_int(d.get('forward_ton_amount'), 'forward_ton_amount'),
    ),
    'jetton_internal_transfer': lambda d: abi.JettonInternalTransferMsgBody(
        query_id=_int(d.get('query_id'), 'query_id'),
        amount=_int(d.get('amount'), 'amount'),
        from_=_opt_account(d.get('from'), 'from'),
        response_address=_opt_account(d.get('response_address'), 'response_address'),
        forward_ton_amount=_int(d.get('forward_ton_amount'), 'forward_ton_amount'),
    ),
    'jetton_notify': lambda d: abi.JettonNotifyMsgBody(
        query_id=_int(d.get('query_id'), 'query_id'),
        amount=_int(d.get('amount'), 'amount'),
        sender=_opt_account(d.get('sender'), 'sender'),
    ),
    'excess': lambda d: abi.ExcessMsgBody(query_id=_int(d.get('query_id'), 'query_id')),
}


def _decoded_body(content: Dict[str, Any], op_code: Optional[int]) -> Optional[DecodedBody]:
    decoded = content.get('decoded')
    if not isinstance(decoded, dict) or not decoded.get('type'):
        return None
    kind = decoded['type']
    name = abi.OP_NAMES.get(op_code, kind) if op_code is not None else kind
    decoder = _BODY_DECODERS.get(kind)
    if decoder is None:
        return DecodedBody(name=name, value={k: v for k, v in decoded.items() if k != 'type'})
    return DecodedBody(name=name, value=decoder(decoded))


def _parse_message(m: Dict[str, Any]) -> Message:
    content = m.get('message_content') or {}
    op_code = parse_opcode(m.get('opcode'))
    init = None
    init_state = m.get('init_state')
    if isinstance(init_state, dict) and init_state.get('body'):
        try:
            init = base64.b64decode(init_state['body'])
        except ValueError as e:
            raise TraceFormatError(f"bad init_state body: {e}") from e
    return Message(
        destination=_account(m.get('destination'), 'in_msg.destination'),
        source=_opt_account(m.get('source'), 'in_msg.source'),
        value=_int(m.get('value'), 'in_msg.value'),
        fwd_fee=_int(m.get('fwd_fee'), 'in_msg.fwd_fee'),
        bounce=bool(m.get('bounce')),
        bounced=bool(m.get('bounced')),
        op_code=op_code,
        decoded_body=_decoded_body(content, op_code),
        init=init,
        init_interfaces=list(m.get('init_interfaces') or []),
    )


def _parse_additional_info(info: Optional[Dict[str, Any]]) -> Optional[TraceAdditionalInfo]:
    if not info:
        return None
    result = TraceAdditionalInfo(jetton_master=_opt_account(info.get('jetton_master'), 'jetton_master'))
    item = info.get('nft_item')
    if item:
        result.nft_item = NftItem(
            address=_account(item.get('address'), 'nft_item.address'),
            index=_int(item.get('index'), 'nft_item.index'),
            collection=_opt_account(item.get('collection'), 'nft_item.collection'),
            owner=_opt_account(item.get('owner'), 'nft_item.owner'),
            verified=bool(item.get('verified', False)),
            metadata=dict(item.get('metadata') or {}),
        )
    sale = info.get('nft_sale')
    if sale:
        result.nft_sale = NftSaleContract(
            nft_price=_int(sale.get('nft_price'), 'nft_sale.nft_price'),
            owner=_opt_account(sale.get('owner'), 'nft_sale.owner'),
            market_fee=_int(sale.get('market_fee'), 'nft_sale.market_fee'),
            royalty_amount=_int(sale.get('royalty_amount'), 'nft_sale.royalty_amount'),
        )
    sub = info.get('subscription')
    if sub:
        result.subscription = SubscriptionInfo(
            wallet=_opt_account(sub.get('wallet'), 'subscription.wallet'),
            beneficiary=_opt_account(sub.get('beneficiary'), 'subscription.beneficiary'),
            amount=_int(sub.get('amount'), 'subscription.amount'),
        )
    return result


def _is_success(description: Dict[str, Any]) -> bool:
    if description.get('aborted'):
        return False
    compute = description.get('compute_ph') or {}
    return bool(compute.get('skipped')) or bool(compute.get('success', True))


def _entries(value: Any, what: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise TraceFormatError(f"{what} must be a list of objects")
    return value


def _parse_node(node: Dict[str, Any], txs: Dict[str, Any]) -> Trace:
    tx_hash = node.get('tx_hash')
    info = txs.get(tx_hash)
    if not isinstance(info, dict):
        raise TraceFormatError(f"transaction {tx_hash!r} is referenced by the trace but missing")
    description = info.get('description') or {}
    compute = description.get('compute_ph')

    children_nodes = _entries(node.get('children'), f"children of {tx_hash!r}")
    children = [_parse_node(c, txs) for c in children_nodes]
    child_msgs = {c.get('in_msg_hash') for c in children_nodes}

    out_msgs: List[OutMessage] = []
    for m in _entries(info.get('out_msgs'), f"out_msgs of {tx_hash!r}"):
        if m.get('hash') in child_msgs:
            continue
        out_msgs.append(OutMessage(
            destination=_opt_account(m.get('destination'), 'out_msg.destination'),
            value=_int(m.get('value'), 'out_msg.value'),
            fwd_fee=_int(m.get('fwd_fee'), 'out_msg.fwd_fee'),
            op_code=parse_opcode(m.get('opcode')),
        ))

    in_msg = info.get('in_msg')
    return Trace(
        account=_account(info.get('account'), 'account'),
        success=_is_success(description),
        tx_type=TxType.TICK_TOCK if description.get('type') == 'tick_tock' else TxType.ORDINARY,
        account_interfaces=list(info.get('interfaces') or []),
        compute_phase=ComputePhase(skipped=bool(compute.get('skipped')), skip_reason=compute.get('reason'))
        if isinstance(compute, dict) else None,
        orig_status=_status(info.get('orig_status', 'active')),
        end_status=_status(info.get('end_status', 'active')),
        in_msg=_parse_message(in_msg) if isinstance(in_msg, dict) else None,
        out_msgs=out_msgs,
        total_fee=_int(info.get('total_fees'), 'total_fees'),
        additional_info=_parse_additional_info(info.get('additional_info')),
        children=children,
        lt=_int(info.get('lt'), 'lt'),
        hash=tx_hash,
    )


def parse_trace(obj: Dict[str, Any]) -> Trace:
    """
    Build a Trace tree from one toncenter trace object.
    Raises TraceFormatError when the document does not describe a trace.
    """
    if not isinstance(obj, dict) or not isinstance(obj.get('trace'), dict):
        raise TraceFormatError("trace object must contain a 'trace' tree")
    txs = obj.get('transactions')
    if not isinstance(txs, dict):
        raise TraceFormatError("trace object must contain a 'transactions' map")
    trace = _parse_node(obj['trace'], txs)
    logger.debug(f"[TONCENTER] parsed trace {obj.get('trace_id') or trace.hash}: "
                 f"{sum(1 for _ in trace.walk())} transactions")
    return trace


def parse_traces_response(obj: Dict[str, Any]) -> List[Trace]:
    """
    Accept either a ``/traces`` response (``{"traces": [...]}``) or a single trace object.
    """
    if isinstance(obj, dict) and isinstance(obj.get('traces'), list):
        return [parse_trace(t) for t in obj['traces']]
    return [parse_trace(obj)]


def address_book_from_response(obj: Dict[str, Any]) -> StaticAddressBook:
    """
    Names from the ``address_book`` section: the ``.ton`` domain when the
    indexer resolved one. Unparsable keys are skipped.
    """
    book = StaticAddressBook()
    section = obj.get('address_book') if isinstance(obj, dict) else None
    for raw, entry in (section or {}).items():
        try:
            account = AccountID.parse(raw)
        except ValueError as e:
            logger.warning(f"[TONCENTER] skip address book entry: {e}")
            continue
        if not isinstance(entry, dict):
            logger.warning(f"[TONCENTER] skip address book entry for {raw}: not an object")
            continue
        domain = entry.get('domain')
        if domain:
            book.accounts[account] = AccountInfo(name=domain,
                                                 is_scam=bool(entry.get('is_scam', False)),
                                                 is_wallet=bool(entry.get('is_wallet', False)))
    return book
