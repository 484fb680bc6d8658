"""
Fleet

Data access for cars, their manufacturers and the drivers assigned to them.
"""

from fleet.entities import Car, Driver, Manufacturer
from fleet.exceptions import DataAccessError, FleetError

__all__ = ["Car", "Driver", "Manufacturer", "DataAccessError", "FleetError"]
