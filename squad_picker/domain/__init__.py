"""Domain layer: models, result types and optimization services."""
