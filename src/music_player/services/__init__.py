"""Player session services."""
