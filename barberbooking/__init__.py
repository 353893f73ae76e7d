"""
barberbooking - availability engine and booking backend for a barbershop.
"""

__version__ = "0.1.0"
