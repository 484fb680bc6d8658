"""
Driver

This package provides data access for drivers.
"""

from fleet.driver.repository import DriverRepository

__all__ = ["DriverRepository"]
