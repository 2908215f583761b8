"""Staff positions, traits, candidates and hiring."""
