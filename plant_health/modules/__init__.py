"""Bounded contexts of the Plant Health application."""
