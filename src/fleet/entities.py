"""
Domain entities mapped by the repositories.

Manufacturer and Driver are immutable values; a Car owns a reference to its
manufacturer and carries the drivers loaded alongside it.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Manufacturer:
    """
    A car manufacturer.

    Attributes:
        name: Brand name (e.g. Tesla).
        country: Country of origin.
        id: Database primary key (None for new records).
    """
    name: str
    country: str
    id: Optional[int] = None


@dataclass(frozen=True)
class Driver:
    """
    A licensed driver.

    Attributes:
        name: Full name.
        license_number: Driving license number.
        id: Database primary key (None for new records).
    """
    name: str
    license_number: str
    id: Optional[int] = None


@dataclass
class Car:
    """
    A car in the fleet.

    Attributes:
        model: Model name (e.g. Model 3).
        manufacturer: The owning manufacturer; must already be persisted.
        drivers: Drivers assigned to the car. Populated on read and written
            only by CarRepository.update().
        id: Database primary key (None until created).
    """
    model: str
    manufacturer: Manufacturer
    drivers: list[Driver] = field(default_factory=list)
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"Car(id={self.id}, model={self.model!r}, manufacturer={self.manufacturer.name!r})"
