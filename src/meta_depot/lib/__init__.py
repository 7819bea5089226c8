"""Self-contained libraries used by the publish service."""
