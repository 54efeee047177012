"""
Core package - shared text, number and month helpers.
"""
