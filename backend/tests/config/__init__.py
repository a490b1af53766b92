"""
Test configuration package: marker assignment shared by the test suite.
"""
