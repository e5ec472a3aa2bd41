"""
Contact list distribution service.
"""

__version__ = "1.0.0"
