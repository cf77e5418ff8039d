"""
Blocks feature: block entities, templates and instantiation.
"""
