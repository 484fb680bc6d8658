"""Seed a small fleet of manufacturers, drivers and cars into the database."""
from fleet.car import CarRepository
from fleet.driver import DriverRepository
from fleet.entities import Car, Driver, Manufacturer
from fleet.logger import get_logger
from fleet.manufacturer import ManufacturerRepository

logger = get_logger("fleet.scripts.seed_fleet")

INITIAL_MANUFACTURERS = [
    {"name": "Tesla", "country": "USA"},
    {"name": "Toyota", "country": "Japan"},
    {"name": "Skoda", "country": "Czech Republic"},
]

INITIAL_DRIVERS = [
    {"name": "Jane", "license_number": "X1"},
    {"name": "Bob", "license_number": "X2"},
    {"name": "Alice", "license_number": "X3"},
]

# model, manufacturer name, license numbers of assigned drivers
INITIAL_CARS = [
    ("Model3", "Tesla", ["X1"]),
    ("Prius", "Toyota", ["X1", "X2"]),
    ("Octavia", "Skoda", ["X3"]),
]


def main():
    manufacturer_repo = ManufacturerRepository()
    driver_repo = DriverRepository()
    car_repo = CarRepository()

    existing = {m.name: m for m in manufacturer_repo.get_all()}
    manufacturers = {}
    for manufacturer in INITIAL_MANUFACTURERS:
        if manufacturer["name"] in existing:
            logger.info(f"Skipping {manufacturer['name']} - already exists")
            manufacturers[manufacturer["name"]] = existing[manufacturer["name"]]
            continue
        manufacturers[manufacturer["name"]] = manufacturer_repo.create(Manufacturer(**manufacturer))

    drivers = {}
    for driver in INITIAL_DRIVERS:
        found = driver_repo.get_by_license_number(driver["license_number"])
        if found:
            logger.info(f"Skipping driver {driver['license_number']} - already exists")
            drivers[driver["license_number"]] = found
            continue
        drivers[driver["license_number"]] = driver_repo.create(Driver(**driver))

    for model, manufacturer_name, licenses in INITIAL_CARS:
        car = car_repo.create(Car(model=model, manufacturer=manufacturers[manufacturer_name]))
        car.drivers = [drivers[license_number] for license_number in licenses]
        car_repo.update(car)
        logger.info(f"Created: {car.model} (id={car.id}) with {len(car.drivers)} driver(s)")


if __name__ == "__main__":
    main()
