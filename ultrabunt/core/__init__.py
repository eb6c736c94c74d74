"""Core layer — models, configuration, services."""
