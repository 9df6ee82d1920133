"""HTTP API for the migrator."""
