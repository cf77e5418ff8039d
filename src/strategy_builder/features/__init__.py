"""
Feature slices of the strategy builder engine.
"""
