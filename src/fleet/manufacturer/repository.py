from dataclasses import replace
from typing import List, Optional

import psycopg

from fleet import db
from fleet.entities import Manufacturer
from fleet.exceptions import DataAccessError
from fleet.logger import get_logger

logger = get_logger(__name__)


class ManufacturerRepository:
    """
    Repository for manufacturer data access.
    Encapsulates all SQL and queries for the manufacturers table.
    """

    def __init__(self, provider: db.ConnectionProvider = None):
        self.provider = provider or db.get_provider()

    def create(self, manufacturer: Manufacturer) -> Manufacturer:
        """Insert a manufacturer and return a copy carrying the generated id."""
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "INSERT INTO manufacturers (name, country) VALUES (%s, %s) RETURNING id",
                    (manufacturer.name, manufacturer.country),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to create {manufacturer}: {e}")
            raise DataAccessError(f"Couldn't create {manufacturer}", e) from e
        logger.info(f"Created manufacturer #{row['id']} ({manufacturer.name})")
        return replace(manufacturer, id=row["id"])

    def get(self, manufacturer_id: int) -> Optional[Manufacturer]:
        """Get a non-deleted manufacturer by ID."""
        try:
            with self.provider.get_connection() as conn:
                row = db.fetch_one(
                    conn,
                    "SELECT id, name, country FROM manufacturers "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (manufacturer_id,),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to get manufacturer {manufacturer_id}: {e}")
            raise DataAccessError(f"Couldn't get manufacturer by id {manufacturer_id}", e) from e
        return self._row_to_manufacturer(row) if row else None

    def get_all(self) -> List[Manufacturer]:
        """List all non-deleted manufacturers."""
        try:
            with self.provider.get_connection() as conn:
                rows = db.fetch_all(
                    conn,
                    "SELECT id, name, country FROM manufacturers "
                    "WHERE is_deleted = FALSE ORDER BY id",
                )
        except psycopg.Error as e:
            logger.error(f"Failed to list manufacturers: {e}")
            raise DataAccessError("Couldn't get a list of manufacturers", e) from e
        return [self._row_to_manufacturer(row) for row in rows]

    def update(self, manufacturer: Manufacturer) -> Manufacturer:
        """Update name and country of a non-deleted manufacturer."""
        try:
            with self.provider.get_connection() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE manufacturers SET name = %s, country = %s "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (manufacturer.name, manufacturer.country, manufacturer.id),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to update {manufacturer}: {e}")
            raise DataAccessError(f"Couldn't update {manufacturer}", e) from e
        if affected:
            logger.info(f"Updated manufacturer #{manufacturer.id}")
        else:
            logger.warning(f"No active manufacturer #{manufacturer.id} to update")
        return manufacturer

    def delete(self, manufacturer_id: int) -> bool:
        """Soft-delete a manufacturer. Returns False if nothing was affected."""
        try:
            with self.provider.get_connection() as conn:
                affected = db.execute(
                    conn,
                    "UPDATE manufacturers SET is_deleted = TRUE "
                    "WHERE id = %s AND is_deleted = FALSE",
                    (manufacturer_id,),
                )
        except psycopg.Error as e:
            logger.error(f"Failed to delete manufacturer {manufacturer_id}: {e}")
            raise DataAccessError(f"Couldn't delete manufacturer by id {manufacturer_id}", e) from e
        logger.info(f"Deleted manufacturer #{manufacturer_id}: {affected > 0}")
        return affected > 0

    @staticmethod
    def _row_to_manufacturer(row: dict) -> Manufacturer:
        return Manufacturer(id=row["id"], name=row["name"], country=row["country"])
