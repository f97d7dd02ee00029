# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Exceptions raised when crossing into the foreign tensor runtime."""

from __future__ import annotations

from typing import Any


class TorchBridgeError(Exception):
    """Base class for every error raised by torchbridge."""


class UnsupportedElementType(TorchBridgeError, TypeError):
    """Raised when a requested element type has no native array counterpart."""

    def __init__(self, requested: Any, message: str | None = None):
        self.requested = requested
        if message is None:
            message = (
                f"Unsupported element type {requested!r}; expected one of "
                "uint8, int16, int32, int64, float32, float64"
            )
        super().__init__(message)


class ForeignHandleInvalid(TorchBridgeError, ValueError):
    """Raised when the foreign tensor or its storage cannot be used."""


__all__ = ["TorchBridgeError", "UnsupportedElementType", "ForeignHandleInvalid"]
