"""
Test suite for the constant-product liquidity pool

Contains:
- tests/unit/          : Unit tests for math, ledger, guards, pool operations
"""
