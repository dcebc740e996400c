"""HTTP API for the template generator."""
