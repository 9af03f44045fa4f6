"""Core configuration and logging for Inkpost."""
