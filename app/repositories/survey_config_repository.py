"""
Survey Config Repository - AI Use-Case Portfolio
app/repositories/survey_config_repository.py

Stores survey definitions verbatim, keyed by questionnaire id.
"""

from typing import Any, Dict, Optional

from app.repositories.base import BaseRepository


class SurveyConfigRepository(BaseRepository):
    """Repository for survey definitions."""

    TABLE_NAME = "SURVEY_CONFIGS"

    def get_by_id(self, config_id: str) -> Optional[Dict[str, Any]]:
        sql = f"""
            SELECT ID, TITLE, SURVEY_CONFIG, UPDATED_AT
            FROM {self.TABLE_NAME}
            WHERE ID = %s
        """
        row = self.execute_query(sql, (config_id,), fetch_one=True)
        if not row:
            return None
        return self._row_to_dict(row)

    def upsert(self, config_id: str, survey_config: Dict[str, Any], title: Optional[str] = None) -> Dict[str, Any]:
        now = self.utc_now()
        config_json = self.to_json(survey_config)

        sql = f"""
            MERGE INTO {self.TABLE_NAME} t
            USING (SELECT %s AS ID) s
            ON t.ID = s.ID
            WHEN NOT MATCHED THEN INSERT (ID, TITLE, SURVEY_CONFIG, UPDATED_AT)
                VALUES (%s, %s, %s, %s)
            WHEN MATCHED THEN UPDATE SET
                TITLE = COALESCE(%s, t.TITLE),
                SURVEY_CONFIG = %s,
                UPDATED_AT = %s
        """
        params = (
            config_id,
            config_id, title, config_json, now,
            title, config_json, now,
        )
        self.execute_query(sql, params, commit=True)

        return self.get_by_id(config_id)

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to dictionary."""
        return {
            "id": row["ID"],
            "title": row["TITLE"],
            "survey_config": self.from_json(row["SURVEY_CONFIG"], default={}),
            "updated_at": self.normalize_timestamp(row["UPDATED_AT"]),
        }
