"""HTTP API of the plant diagnosis module."""
