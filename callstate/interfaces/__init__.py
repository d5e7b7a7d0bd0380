"""
Interfaces presented to network clients and hooks.
"""
