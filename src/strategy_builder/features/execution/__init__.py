"""
Execution feature: cycle detection and topological ordering.
"""
