"""
External data access
"""
