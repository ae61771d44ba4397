"""
Tests package for the CloudPix backend.

This package contains test suites organized by type:
- unit/: Fast tests against in-memory fakes and mocks
- property/: Hypothesis property tests
- integration/: Tests against a real Redis server
- e2e/: End-to-end share link workflows
"""
