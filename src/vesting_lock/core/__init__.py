"""
Vesting Lock Core Module

Core functionality of the vesting lock script:
- Fixed-layout codecs for lock args and cell data
- Authorization, freshness and vesting schedule evaluation
- Transition validation and the script entry point
- In-memory transaction model implementing the ledger query interface
"""

__all__ = []
