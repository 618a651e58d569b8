"""Configuration: option models, TOML discovery, settings and logging."""
