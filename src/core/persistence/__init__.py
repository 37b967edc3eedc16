"""JSON state files under the state directory."""
