"""
Travel Pricing Package

Pricing calculator for group tour scenarios.
Turns nights, passenger mix, cost lines, exchange rate, margin and
commission policy into a priced recap.
"""

__version__ = "1.0.0"
