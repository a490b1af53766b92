"""Test doubles for the booking engine ports."""
