"""
Logging setup and per-analysis summaries
"""
