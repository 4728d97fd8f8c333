"""HTTP API for the dry-run engine."""
