"""TaskFlow API application package."""
