"""HTTP layer: routers, middleware and dependency accessors."""
