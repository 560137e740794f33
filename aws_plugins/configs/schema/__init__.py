"""Config schema validation."""
