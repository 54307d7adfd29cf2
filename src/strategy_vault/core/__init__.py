"""
Core domain models, integer math primitives, and invariants.

This module contains the foundational building blocks that are independent
of the host environment (storage, clock, auth, token balances).
"""
