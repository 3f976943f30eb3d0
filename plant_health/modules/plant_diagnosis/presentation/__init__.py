"""Presentation layer: routers, schemas and dependency wiring."""
