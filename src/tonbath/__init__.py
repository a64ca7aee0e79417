# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from tonbath.actions import Action, ActionType, RefundType
from tonbath.address import AccountID
from tonbath.address_book import AccountInfo, AddressBook, StaticAddressBook
from tonbath.bubble import Bubble, from_trace
from tonbath.errors import BathError, StrawError, TraceFormatError
from tonbath.merger import merge_all
from tonbath.summarizer import ActionsList, find_actions
from tonbath.value_flow import ValueFlow

__all__ = [
    "AccountID", "AccountInfo", "Action", "ActionType", "ActionsList", "AddressBook", "BathError", "Bubble",
    "RefundType", "StaticAddressBook", "StrawError", "TraceFormatError", "ValueFlow", "find_actions",
    "from_trace", "merge_all",
]
