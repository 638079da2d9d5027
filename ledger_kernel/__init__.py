"""
Ledger Kernel

The double-entry core of the inventory ledger:
- Chart of accounts with protected system accounts
- Append-only journal with all-or-nothing posting
- Balance validation rounded to currency precision
- Derived balances computed from journal lines, never stored
"""

__version__ = "0.1.0"
