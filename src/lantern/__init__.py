"""
Lantern - finding overlay and log review for captured traffic.
"""

__version__ = "0.1.0"
