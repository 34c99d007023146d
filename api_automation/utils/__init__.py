"""Shared helpers: synthetic test data, response validation, template rendering."""
