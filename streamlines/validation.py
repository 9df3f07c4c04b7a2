#!/usr/bin/env python3
# tab-width:4

"""
Shared exceptions for streamlines.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """
    Validation error that can carry both Python API and CLI-friendly messages.

    When raised from library functions, can include a CLI-specific message
    that references arguments and flags instead of parameter names.
    """

    def __init__(
        self,
        msg: str,
        cli_msg: str | None = None,
    ):
        super().__init__(msg)
        self.cli_msg = cli_msg


class UnsupportedInputKind(ValidationError):
    """The input is not a response, a readable stream or a blob."""


class InvalidRange(ValidationError):
    """lines_around() was called with after < before."""
