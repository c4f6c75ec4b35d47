"""Motion Control Video API."""
