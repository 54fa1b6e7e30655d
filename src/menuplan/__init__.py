"""
Menuplan - weekly meal planning for a two-person household.

Generates a 7-day, 5-slot plan per person from a fixed meal catalog,
repairs whatever the generation providers return, and keeps the shared
meals (every dinner, weekend lunches) aligned between the two plans.
"""

__version__ = "1.0.0"
