"""
Application layer: block catalog, built-in templates and settings.
"""
