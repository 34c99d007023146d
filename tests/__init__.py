"""
Test suite for the API automation framework.

This package contains:
- unit/: isolated tests for models, helpers and the performance core
- integration/: HTTP service tests against the in-process stub API
"""
