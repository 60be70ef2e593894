"""Process-local state: cached snapshots and the invitation role ledger."""
