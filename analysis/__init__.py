"""
Category scoring, composite scoring and the analysis orchestrator
"""
