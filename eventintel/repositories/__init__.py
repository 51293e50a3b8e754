"""Record store repositories."""
