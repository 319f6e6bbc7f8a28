"""Parkir: a fixed-capacity parking facility with first-fit allocation and hourly fees"""

__version__ = "1.0.0"
