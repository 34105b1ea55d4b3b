"""NPI registry lookup: client, normalizer and batch dispatcher."""
