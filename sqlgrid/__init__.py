"""Materialize SQL query results into display-ready rows."""
