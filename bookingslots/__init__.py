"""
bookingslots - appointment availability engine.
"""

__version__ = "0.1.0"
