"""Command and query handlers of the plant diagnosis module."""
