from collections import defaultdict
from typing import List, Optional

import psycopg

from fleet import db
from fleet.entities import Car, Driver, Manufacturer
from fleet.exceptions import DataAccessError
from fleet.logger import get_logger

logger = get_logger(__name__)

# Car columns joined with the owning manufacturer, shared by every read.
SELECT_CARS = """
    SELECT c.id AS car_id, c.model, m.id AS manufacturer_id, m.name, m.country
    FROM cars c
    JOIN manufacturers m ON c.manufacturer_id = m.id
"""

SELECT_DRIVERS_FOR_CARS = """
    SELECT cd.car_id, d.id, d.name, d.license_number
    FROM drivers d
    JOIN cars_drivers cd ON cd.driver_id = d.id
    WHERE cd.car_id = ANY(%s) AND d.is_deleted = FALSE
    ORDER BY cd.car_id, d.id
"""


class CarRepository:
    """
    Repository for car data access.

    Encapsulates all SQL for the cars table and the cars_drivers join table.
    Cars are soft-deleted: deleted rows stay in the table but are never
    returned or updated. Driver assignments are only written by update(),
    which replaces the whole set in one transaction.
    """

    def __init__(self, provider: db.ConnectionProvider = None):
        self.provider = provider or db.get_provider()

    def create(self, car: Car) -> Car:
        """
        Insert the car row and assign the generated id to ``car``.

        Driver assignments are not persisted here; use update().
        """
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "INSERT INTO cars (model, manufacturer_id) VALUES (%s, %s) RETURNING id",
                    (car.model, car.manufacturer.id),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to create {car}: {e}")
            raise DataAccessError(f"Couldn't create {car}", e) from e
        car.id = row["id"]
        logger.info(f"Created car #{car.id} ({car.model})")
        return car

    def get(self, car_id: int) -> Optional[Car]:
        """Get a non-deleted car with its manufacturer and drivers, or None."""
        logger.debug(f"Fetching car #{car_id}")
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    SELECT_CARS + " WHERE c.id = %s AND c.is_deleted = FALSE",
                    (car_id,),
                )
                if row is None:
                    return None
                car = self._row_to_car(row)
                self._attach_drivers(conn, [car])
        except psycopg.Error as e:
            logger.error(f"Failed to get car {car_id}: {e}")
            raise DataAccessError(f"Couldn't get car by id {car_id}", e) from e
        return car

    def get_all(self) -> List[Car]:
        """List all non-deleted cars, each with its drivers attached."""
        logger.debug("Fetching all cars")
        try:
            with self.provider.get_connection() as conn:
                rows = db.fetch_all(
                    conn,
                    SELECT_CARS + " WHERE c.is_deleted = FALSE ORDER BY c.id",
                )
                cars = [self._row_to_car(row) for row in rows]
                self._attach_drivers(conn, cars)
        except psycopg.Error as e:
            logger.error(f"Failed to list cars: {e}")
            raise DataAccessError("Couldn't get a list of cars", e) from e
        return cars

    def get_all_by_driver(self, driver_id: int) -> List[Car]:
        """List the non-deleted cars assigned to a driver, with all their drivers."""
        logger.debug(f"Fetching cars for driver #{driver_id}")
        try:
            with self.provider.get_connection() as conn:
                rows = db.fetch_all(
                    conn,
                    SELECT_CARS
                    + """
                    WHERE c.is_deleted = FALSE
                    AND c.id IN (SELECT car_id FROM cars_drivers WHERE driver_id = %s)
                    ORDER BY c.id
                    """,
                    (driver_id,),
                )
                cars = [self._row_to_car(row) for row in rows]
                self._attach_drivers(conn, cars)
        except psycopg.Error as e:
            logger.error(f"Failed to list cars for driver {driver_id}: {e}")
            raise DataAccessError(f"Couldn't get cars by driver id {driver_id}", e) from e
        return cars

    def update(self, car: Car) -> Car:
        """
        Update model and manufacturer of a non-deleted car and replace its
        driver assignments with ``car.drivers``.

        All statements run in one transaction. If no active row matches
        ``car.id`` the assignments are left untouched.
        """
        try:
            with self.provider.transaction() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE cars SET model = %s, manufacturer_id = %s "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (car.model, car.manufacturer.id, car.id),
                )
                if affected:
                    self._replace_drivers(conn, car)
        except psycopg.Error as e:
            logger.error(f"Failed to update {car}: {e}")
            raise DataAccessError(f"Couldn't update {car}", e) from e

        if affected:
            logger.info(f"Updated car #{car.id} with {len(car.drivers)} driver(s)")
        else:
            logger.warning(f"No active car #{car.id} to update")
        return car

    def delete(self, car_id: int) -> bool:
        """
        Soft-delete a car and drop its driver assignments.

        Returns False if the car does not exist or is already deleted.
        """
        try:
            with self.provider.transaction() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE cars SET is_deleted = TRUE WHERE id = %s AND is_deleted = FALSE",
                    (car_id,),
                )
                if affected:
                    db.execute(conn, "DELETE FROM cars_drivers WHERE car_id = %s", (car_id,))
        except psycopg.Error as e:
            logger.error(f"Failed to delete car {car_id}: {e}")
            raise DataAccessError(f"Couldn't delete car by id {car_id}", e) from e
        logger.info(f"Deleted car #{car_id}: {affected > 0}")
        return affected > 0

    # Association helpers

    def _replace_drivers(self, conn: psycopg.Connection, car: Car) -> None:
        db.execute(conn, "DELETE FROM cars_drivers WHERE car_id = %s", (car.id,))
        # One row per driver even if the list repeats one
        driver_ids = dict.fromkeys(driver.id for driver in car.drivers)
        db.execute_many(
            conn,
            "INSERT INTO cars_drivers (car_id, driver_id) VALUES (%s, %s)",
            [(car.id, driver_id) for driver_id in driver_ids],
        )

    def _attach_drivers(self, conn: psycopg.Connection, cars: List[Car]) -> None:
        """Load the non-deleted drivers of all ``cars`` in one query."""
        if not cars:
            return
        rows = db.fetch_all(conn, SELECT_DRIVERS_FOR_CARS, ([car.id for car in cars],))
        drivers_by_car = defaultdict(list)
        for row in rows:
            drivers_by_car[row["car_id"]].append(self._row_to_driver(row))
        for car in cars:
            car.drivers = drivers_by_car.get(car.id, [])

    # Row mapping

    @staticmethod
    def _row_to_car(row: dict) -> Car:
        manufacturer = Manufacturer(
            id=row["manufacturer_id"],
            name=row["name"],
            country=row["country"],
        )
        return Car(id=row["car_id"], model=row["model"], manufacturer=manufacturer)

    @staticmethod
    def _row_to_driver(row: dict) -> Driver:
        return Driver(id=row["id"], name=row["name"], license_number=row["license_number"])
