"""
Integration tests package.

Contains integration tests that verify the interaction between
multiple components: SQLAlchemy repositories on SQLite and the
booking blueprint through the Flask test client.
"""
