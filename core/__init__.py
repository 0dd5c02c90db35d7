"""
Core shared components for the Agenda platform.

Holds the exception taxonomy and the DRF exception handler used by every app.
"""

__version__ = "1.0.0"
