"""Infrastructure layer: configuration and in-memory repositories."""
