# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
"""tonbath exceptions."""


class BathError(Exception):
    pass


class TraceFormatError(BathError):
    """A trace document could not be turned into a Trace tree."""


class StrawError(BathError):
    """A straw left a bubble in a shape no other part of the pipeline understands."""

    def __init__(self, straw: str, message: str):
        super().__init__(f"straw {straw}: {message}")
        self.straw = straw
