# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
from __future__ import annotations
from typing import List, Optional, Sequence

from loguru import logger

from tonbath.bubble import Bubble, BubbleInfo
from tonbath.errors import StrawError
from tonbath.straws import DEFAULT_STRAWS, Straw


def _check(straw: Straw, bubble: Bubble) -> None:
    if not isinstance(bubble.info, BubbleInfo):
        raise StrawError(straw.name, f"left info of type {type(bubble.info).__name__}")
    for child in bubble.children:
        if not isinstance(child, Bubble):
            raise StrawError(straw.name, f"left child of type {type(child).__name__}")


def _apply(bubble: Bubble, straw: Straw) -> int:
    """
    Post-order walk applying one straw; returns the number of rewrites.
    """
    merged = 0
    for child in list(bubble.children):
        merged += _apply(child, straw)
    if straw(bubble):
        _check(straw, bubble)
        logger.debug(f"[{straw.name}] merged into {bubble.info.kind} ({len(bubble.children)} children left)")
        merged += 1
    return merged


def merge_all(bubble: Bubble, straws: Optional[Sequence[Straw]] = None) -> Bubble:
    """
    Run straws over the tree until a full pass rewrites nothing.

    A pass applies every straw in priority order, each over the whole tree
    children-first, so a bubble rewritten by a straw is seen in its new shape by
    the straws after it. Every rewrite consumes a transaction bubble or a
    pending deployment, which bounds the number of passes.
    """
    straws: List[Straw] = list(DEFAULT_STRAWS if straws is None else straws)
    passes = 0
    while True:
        passes += 1
        merged = sum(_apply(bubble, straw) for straw in straws)
        if merged == 0:
            break
    logger.debug(f"merge finished after {passes} passes")
    return bubble
