"""Core: models, services, and use cases. No I/O outside persistence."""
