"""Image analysis processors."""
