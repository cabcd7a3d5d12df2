"""Frame index arithmetic, timing curves, and timing strategies."""
