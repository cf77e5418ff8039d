"""
Shared code used across features.
"""
