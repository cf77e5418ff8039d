"""
Strategies feature: the strategy aggregate, its validator, editor and serializer.
"""
