"""
Core modules for LLM Cost Score.

This package contains usage patterns, model pricing, and the monthly
cost estimator.
"""
