"""
Bank Demo Service

A small demo banking service: accounts, deposits, withdrawals, transaction
history and transfers over an in-memory ledger or a document-backed store.
"""

__version__ = "1.0.0"
