"""Pure domain services: catalog index, token resolution, conflict policy."""
