"""
Test suite for Strategy Vault

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/integration/   : End-to-end vault scenarios through the contract facade
"""
