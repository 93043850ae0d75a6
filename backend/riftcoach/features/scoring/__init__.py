"""Single-match performance scoring."""
