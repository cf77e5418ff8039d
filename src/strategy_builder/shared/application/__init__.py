"""
Shared application services.
"""
