"""
Trade Document Kernel

Shared core for the buyer/seller document chain:
- Typed errors and structured logging
- Persistence (companies, documents, line items, action log, counters)
- Pure domain values (document types, roles, ownership, identifiers)
"""

__version__ = "0.1.0"
