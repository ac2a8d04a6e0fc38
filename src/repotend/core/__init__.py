"""Reconciliation engine: read state, plan, execute."""
