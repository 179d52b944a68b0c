"""Concrete adapters for serialguard ports."""
