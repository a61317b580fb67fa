"""Service layer used by the route blueprints."""
