"""HTTP API for NPI lookups."""
