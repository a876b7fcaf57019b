"""Report rendering services."""
