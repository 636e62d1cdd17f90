"""Global yes/no poll service."""
