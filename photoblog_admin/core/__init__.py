"""Configuration, exceptions and shared helpers."""
