"""Configuration defaults, YAML loading and validation."""
