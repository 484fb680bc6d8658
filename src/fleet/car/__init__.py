"""
Car

This package provides data access for cars and their driver assignments.
"""

from fleet.car.repository import CarRepository

__all__ = ["CarRepository"]
