"""
Manufacturer

This package provides data access for car manufacturers.
"""

from fleet.manufacturer.repository import ManufacturerRepository

__all__ = ["ManufacturerRepository"]
