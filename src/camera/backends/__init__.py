"""Camera backend implementations."""
