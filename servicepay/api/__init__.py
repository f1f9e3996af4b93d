"""HTTP API for the service dashboard."""
