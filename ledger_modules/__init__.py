"""
Ledger modules: business-event posting and financial reporting.

Each module sits on top of ledger_kernel and talks to it only through
services, selectors and DTOs.
"""
