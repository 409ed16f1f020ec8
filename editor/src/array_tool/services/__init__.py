"""Array generation, compositing, lifecycle and persistence services."""
