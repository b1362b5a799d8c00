"""
lift-log: strength-training log with per-set history and progress analytics.
"""

__version__ = "0.3.0"
