"""Configuration loading (extdl.yml)."""
