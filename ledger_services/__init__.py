"""
ledger_services -- composition root for the ledger.

``LedgerOrchestrator`` wires kernel services, selectors, the event poster
and the reporting service around one session, and is the surface the
rest of the application calls.
"""

from ledger_services.orchestrator import LedgerOrchestrator, initialize_database

__all__ = ["LedgerOrchestrator", "initialize_database"]
