# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
import dataclasses
from enum import Enum
from typing import Any, Optional, Union

from tonbath.address import AccountID

NANO = 10 ** 9


def parse_opcode(value: Union[str, int, None]) -> Optional[int]:
    """
    Accept an opcode as int, hex string ("0x0f8a7ea5") or decimal string.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value & 0xffffffff
    s = str(value).strip().lower()
    if not s:
        return None
    if s.startswith('0x'):
        return int(s, 16) & 0xffffffff
    return int(s) & 0xffffffff


def parse_int(value: Union[str, int, None], default: int = 0) -> int:
    if value is None or value == '':
        return default
    return int(value)


def format_ton(nano: int) -> str:
    """
    Render a nanocoin amount without going through floats: 1500000000 -> "1.5 TON".
    """
    sign = "-" if nano < 0 else ""
    whole, frac = divmod(abs(nano), NANO)
    if frac == 0:
        return f"{sign}{whole} TON"
    return f"{sign}{whole}.{str(frac).rjust(9, '0').rstrip('0')} TON"


def encode_var_uint16(value: int) -> bytes:
    """
    Minimal big-endian encoding of a jetton amount (at most 16 bytes).
    """
    if value < 0:
        raise ValueError(f"negative amount {value}")
    length = (value.bit_length() + 7) // 8
    if length > 16:
        raise ValueError(f"amount {value} does not fit 16 bytes")
    return value.to_bytes(length, 'big')


def make_json_dumpable(obj: Any) -> Any:
    """
    Convert action/value-flow objects to a JSON-dumpable structure.
    Account ids become raw strings, enums their values, bytes hex.
    """
    if isinstance(obj, AccountID):
        return obj.to_raw()
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, bytes):
        return obj.hex()
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: make_json_dumpable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    elif isinstance(obj, dict):
        return {(k.to_raw() if isinstance(k, AccountID) else k): make_json_dumpable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_dumpable(item) for item in obj]
    elif isinstance(obj, (str, int, float, bool, type(None))):
        return obj
    return str(obj)
