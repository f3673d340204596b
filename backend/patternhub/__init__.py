"""
PatternHub - catalog of software design patterns and architectures.
"""

__version__ = "0.1.0"
