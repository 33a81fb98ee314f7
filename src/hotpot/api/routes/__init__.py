"""API route blueprints."""
