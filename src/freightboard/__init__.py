"""
freightboard - drivers, grain freight trips and their financial summaries.
"""

__version__ = "0.1.0"
