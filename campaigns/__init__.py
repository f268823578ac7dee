"""
Campaigns API - owned campaign records behind token authentication.
"""

__version__ = "0.1.0"
