"""Shared infrastructure: database engine and sessions, object storage, outbound HTTP."""
