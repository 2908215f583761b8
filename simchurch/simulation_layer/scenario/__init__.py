"""Challenge scenarios."""
