"""
ShipQuote pricing backend.

Prices vehicle-shipping quotes and orders from a tenant's modifier set and
portal configuration.
"""

__version__ = "0.1.0"
