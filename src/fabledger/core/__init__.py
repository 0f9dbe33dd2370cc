# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
fabledger Core

Records, primitives, the transaction ledger and plain calculation helpers.
"""

from . import calculations, ledger, primitives

__all__ = ["calculations", "ledger", "primitives"]
