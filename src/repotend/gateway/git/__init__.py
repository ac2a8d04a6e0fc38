"""Git gateway: the reconciliation engine's only route to the git backend."""
