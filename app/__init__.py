"""
Portfolio website backend.
"""
