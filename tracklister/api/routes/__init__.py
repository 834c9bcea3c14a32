"""HTTP routes: landing page, OAuth callback, search."""
