"""
Replace Ableton Live's UI fonts with an accessibility-friendly typeface.
"""

__version__ = "1.0.0"
