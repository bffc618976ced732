"""Configuration loading (YAML file, .env, environment) and credentials."""
