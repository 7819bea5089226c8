"""Incremental publisher of compressed JSON listings to a depot."""
