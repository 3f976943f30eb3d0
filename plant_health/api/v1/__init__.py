"""Version 1 of the Plant Health HTTP API."""
