"""
SQLAlchemy implementation of the key-value store.
"""

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from food_rescue.core.exceptions import StorageError
from food_rescue.domain.models.kv_record import KeyValueRecord
from food_rescue.domain.repositories.store import KeyValueStore

logger = logging.getLogger(__name__)


class SQLAlchemyKeyValueStore(KeyValueStore):
    """Stores each namespace as a JSON text blob in the 'kv_store' table."""

    def __init__(self, db: Session):
        self.db = db

    def read(self, key: str, default: Any) -> Any:
        try:
            record = self.db.get(KeyValueRecord, key, populate_existing=True)
        except SQLAlchemyError as e:
            logger.warning("Store read failed for %s, using default: %s", key, e)
            self.db.rollback()
            return default

        if record is None or not record.value:
            return default

        try:
            value = json.loads(record.value)
        except ValueError:
            logger.warning("Corrupt blob under %s, using default", key)
            return default

        return default if value is None else value

    def write(self, key: str, value: Any) -> None:
        try:
            record = self.db.get(KeyValueRecord, key)
            if value is None:
                if record is not None:
                    self.db.delete(record)
            else:
                blob = json.dumps(value)
                if record is None:
                    self.db.add(KeyValueRecord(key=key, value=blob))
                else:
                    record.value = blob
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(details={"key": key, "error": str(e)}) from e
