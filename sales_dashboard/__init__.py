"""
Sales History Dashboard

Filtered aggregate reports over the sales history star schema.
"""

__version__ = "1.0.0"
