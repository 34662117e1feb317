"""
Configuration: environment settings, validated app config and scoring defaults
"""
