from dataclasses import replace
from typing import List, Optional

import psycopg

from fleet import db
from fleet.entities import Driver
from fleet.exceptions import DataAccessError
from fleet.logger import get_logger

logger = get_logger(__name__)


class DriverRepository:
    """
    Repository for driver data access.
    Encapsulates all SQL and queries for the drivers table.
    """

    def __init__(self, provider: db.ConnectionProvider = None):
        self.provider = provider or db.get_provider()

    def create(self, driver: Driver) -> Driver:
        """Insert a driver and return a copy carrying the generated id."""
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "INSERT INTO drivers (name, license_number) VALUES (%s, %s) RETURNING id",
                    (driver.name, driver.license_number),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to create {driver}: {e}")
            raise DataAccessError(f"Couldn't create {driver}", e) from e
        logger.info(f"Created driver #{row['id']} ({driver.license_number})")
        return replace(driver, id=row["id"])

    def get(self, driver_id: int) -> Optional[Driver]:
        """Get a non-deleted driver by ID."""
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "SELECT id, name, license_number FROM drivers "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (driver_id,),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to get driver {driver_id}: {e}")
            raise DataAccessError(f"Couldn't get driver by id {driver_id}", e) from e
        return self._row_to_driver(row) if row else None

    def get_by_license_number(self, license_number: str) -> Optional[Driver]:
        """Get a non-deleted driver by license number."""
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "SELECT id, name, license_number FROM drivers "
                    "WHERE license_number = %s AND is_deleted = FALSE "
                    "ORDER BY id LIMIT 1",
                    (license_number,),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to get driver with license {license_number}: {e}")
            raise DataAccessError(
                f"Couldn't get driver by license number {license_number}", e
            ) from e
        return self._row_to_driver(row) if row else None

    def get_all(self) -> List[Driver]:
        """List all non-deleted drivers."""
        try:
            with self.provider.get_connection() as conn:
                rows = db.fetch_all(
                    conn,
                    "SELECT id, name, license_number FROM drivers "
                    "WHERE is_deleted = FALSE ORDER BY id",
                )
        except psycopg.Error as e:
            logger.error(f"Failed to list drivers: {e}")
            raise DataAccessError("Couldn't get a list of drivers", e) from e
        return [self._row_to_driver(row) for row in rows]

    def update(self, driver: Driver) -> Driver:
        """Update name and license number of a non-deleted driver."""
        try:
            with self.provider.get_connection() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE drivers SET name = %s, license_number = %s "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (driver.name, driver.license_number, driver.id),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to update {driver}: {e}")
            raise DataAccessError(f"Couldn't update {driver}", e) from e
        if affected:
            logger.info(f"Updated driver #{driver.id}")
        else:
            logger.warning(f"No active driver #{driver.id} to update")
        return driver

    def delete(self, driver_id: int) -> bool:
        """Soft-delete a driver. Returns False if nothing was affected."""
        try:
            with self.provider.get_connection() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE drivers SET is_deleted = TRUE WHERE id = %s AND is_deleted = FALSE",
                    (driver_id,),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to delete driver {driver_id}: {e}")
            raise DataAccessError(f"Couldn't delete driver by id {driver_id}", e) from e
        logger.info(f"Deleted driver #{driver_id}: {affected > 0}")
        return affected > 0

    @staticmethod
    def _row_to_driver(row: dict) -> Driver:
        return Driver(id=row["id"], name=row["name"], license_number=row["license_number"])
