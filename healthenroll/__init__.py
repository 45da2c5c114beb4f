"""
Health program enrollment backend.
"""
