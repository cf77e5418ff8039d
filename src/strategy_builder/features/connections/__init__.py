"""
Connections feature: typed edges, per-connection validation and graph queries.
"""
