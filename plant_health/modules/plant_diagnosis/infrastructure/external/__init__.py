"""Diagnosis oracle implementations and the provider factory."""
