"""
Codegen feature: turns a validated strategy graph into a Python strategy class.
"""
