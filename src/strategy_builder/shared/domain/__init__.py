"""
Shared domain layer: value objects and exceptions.
"""
