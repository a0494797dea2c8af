"""
Test Suite

Contains unit tests for the backend system.

Structure:
- tests/unit/: Tests for individual components (schemas, adapters, detection, ranking, API)

Uses pytest with pytest-asyncio for testing async functionality. No test
touches the network: API clients are exercised with mocked responses.
"""
