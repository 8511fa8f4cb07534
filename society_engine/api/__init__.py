"""HTTP boundary for the society operations engine."""
