"""Infrastructure layer: persistence, auth primitives, email and HTTP API."""
