"""
Vesting Lock - Linear Vesting Lock Script Validator

A deterministic validator deciding whether a proposed state transition of a
token-vesting cell is legal.

Main Components:
- Core: codecs, authorization, temporal guard, vesting math and the
  transition validator
- Ledger model: in-memory cells, scripts and header dependencies
- CLI: transaction verification and encoding helpers
"""

__version__ = "0.1.0"
__author__ = "Vesting Lock Development Team"

__all__ = []
