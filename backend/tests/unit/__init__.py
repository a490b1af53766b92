"""
Unit tests package.

Contains isolated unit tests for entities, services and adapters
that run against mocks and in-memory fakes, without a database
or HTTP requests.
"""
