"""External integrations: image storage, SMTP mail and OAuth providers."""
