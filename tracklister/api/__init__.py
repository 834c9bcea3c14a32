"""HTTP surface: app factory, middleware, routes."""
