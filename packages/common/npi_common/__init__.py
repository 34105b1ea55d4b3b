"""Shared models, errors and configuration for the NPI lookup packages."""
