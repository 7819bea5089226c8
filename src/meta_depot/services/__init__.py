"""Service layer orchestrating the libraries."""
