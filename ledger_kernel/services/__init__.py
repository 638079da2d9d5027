"""Kernel services: the write side of the ledger."""
