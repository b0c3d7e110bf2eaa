"""SQLite persistence for the local development ledger."""
