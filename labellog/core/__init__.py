"""Core utilities shared across labellog: configuration, errors and diagnostics."""
