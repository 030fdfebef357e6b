"""
Supabase record store implementation.

Reads and writes glucose records in a Supabase (PostgREST) table through
the supabase client.
"""

import logging
from typing import Any

from supabase import Client, create_client

from glucose_ledger.domain.glucose import GlucoseRecord
from glucose_ledger.utils.exceptions import ConfigurationError, RecordPersistenceError
from glucose_ledger.utils.parameters import StoreConfig

logger = logging.getLogger(__name__)


class SupabaseGlucoseStore:
    """
    GlucoseRecordStore backed by a Supabase table.

    The client is created from configuration unless one is injected. Every
    API or transport failure is raised as RecordPersistenceError.
    """

    def __init__(self, config: StoreConfig, client: Client | None = None) -> None:
        """
        Initialize Supabase store.

        Args:
            config: Store configuration (url, key, table).
            client: Pre-built client, e.g. one carrying a user session.

        Raises:
            ConfigurationError: If no client is given and url or key is missing.
        """
        self.config = config
        self.table = config.table
        self.client = client or self._create_client()

    def _create_client(self) -> Client:
        if not self.config.url or not self.config.key:
            raise ConfigurationError("Store url and key must be configured")

        try:
            client = create_client(self.config.url, self.config.key)
        except Exception as e:
            raise ConfigurationError(f"Failed to create Supabase client: {e}") from e

        logger.info(f"Connected to Supabase table '{self.table}'")
        return client

    def find(self, user_id: str, date: str, time_of_day: str) -> list[str]:
        try:
            response = (
                self.client.table(self.table)
                .select("id")
                .eq("user_id", user_id)
                .eq("date", date)
                .eq("time_of_day", time_of_day)
                .execute()
            )
        except Exception as e:
            raise RecordPersistenceError(f"Error checking for existing record: {e}") from e

        return [str(row["id"]) for row in response.data or []]

    def update(self, record_id: str, fields: dict[str, Any]) -> None:
        try:
            self.client.table(self.table).update(fields).eq("id", record_id).execute()
        except Exception as e:
            raise RecordPersistenceError(f"Error updating record: {e}") from e

    def insert(self, fields: dict[str, Any]) -> GlucoseRecord:
        try:
            response = self.client.table(self.table).insert(fields).execute()
        except Exception as e:
            raise RecordPersistenceError(f"Error inserting record: {e}") from e

        if not response.data:
            raise RecordPersistenceError("Error inserting record: no row returned")

        return GlucoseRecord.model_validate(response.data[0])

    def list_records(self, user_id: str, since: str | None = None) -> list[GlucoseRecord]:
        try:
            query = self.client.table(self.table).select("*").eq("user_id", user_id)
            if since:
                query = query.gte("date", since)
            response = query.order("date", desc=True).execute()
        except Exception as e:
            raise RecordPersistenceError(f"Error fetching records: {e}") from e

        records = [GlucoseRecord.model_validate(row) for row in response.data or []]
        logger.info(f"Fetched {len(records)} records for user {user_id}")
        return records
