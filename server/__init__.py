"""HTTP API for the shift roster."""
