"""Infrastructure layer: persistence, cache, security and external integrations."""
