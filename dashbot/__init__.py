"""dashbot - Discord bot with an OAuth-protected dashboard API"""

__version__ = "1.0.0"
