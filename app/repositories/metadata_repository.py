"""
Metadata Repository - AI Use-Case Portfolio
app/repositories/metadata_repository.py

Data access layer for the single 'default' metadata configuration record.
"""

from typing import Any, Dict, Optional

from app.repositories.base import BaseRepository

DEFAULT_CONFIG_ID = "default"


class MetadataRepository(BaseRepository):
    """Repository for the scoring model / T-shirt sizing configuration."""

    TABLE_NAME = "METADATA_CONFIG"

    def get_config(self, config_id: str = DEFAULT_CONFIG_ID) -> Optional[Dict[str, Any]]:
        """
        Retrieve the configuration record.

        Returns:
            Config dict or None if nothing has been saved yet
        """
        sql = f"""
            SELECT ID, SCORING_MODEL, TSHIRT_SIZING, UPDATED_AT
            FROM {self.TABLE_NAME}
            WHERE ID = %s
        """
        row = self.execute_query(sql, (config_id,), fetch_one=True)
        if not row:
            return None
        return self._row_to_dict(row)

    def save_config(
        self,
        scoring_model: Dict[str, Any],
        tshirt_sizing: Dict[str, Any],
        config_id: str = DEFAULT_CONFIG_ID,
    ) -> Dict[str, Any]:
        """Insert or replace the configuration record."""
        now = self.utc_now()
        scoring_json = self.to_json(scoring_model)
        sizing_json = self.to_json(tshirt_sizing)

        sql = f"""
            MERGE INTO {self.TABLE_NAME} t
            USING (SELECT %s AS ID) s
            ON t.ID = s.ID
            WHEN NOT MATCHED THEN INSERT (ID, SCORING_MODEL, TSHIRT_SIZING, UPDATED_AT)
                VALUES (%s, %s, %s, %s)
            WHEN MATCHED THEN UPDATE SET
                SCORING_MODEL = %s,
                TSHIRT_SIZING = %s,
                UPDATED_AT = %s
        """
        params = (
            config_id,
            # INSERT values
            config_id, scoring_json, sizing_json, now,
            # UPDATE values
            scoring_json, sizing_json, now,
        )
        self.execute_query(sql, params, commit=True)

        return self.get_config(config_id)

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to dictionary."""
        return {
            "id": row["ID"],
            "scoring_model": self.from_json(row["SCORING_MODEL"], default={}),
            "tshirt_sizing": self.from_json(row["TSHIRT_SIZING"], default={}),
            "updated_at": self.normalize_timestamp(row["UPDATED_AT"]),
        }
