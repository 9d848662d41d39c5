"""
LLM Cost Score.

Estimates monthly per-user cost and affordability of language models.
"""

__version__ = "0.1.0"
