"""Service layer — one module (or package) per feature area."""
