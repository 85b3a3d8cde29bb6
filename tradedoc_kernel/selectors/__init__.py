"""Read-only selectors."""
