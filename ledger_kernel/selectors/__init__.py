"""Read-only selectors over the chart of accounts and the journal."""
