"""Domain layer: exceptions, roles and business services."""
