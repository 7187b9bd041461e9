"""
Response Repository - AI Use-Case Portfolio
app/repositories/response_repository.py

Data access layer for assessment response sessions.
"""

from typing import Any, Dict, List, Optional
from uuid import uuid4

from app.models.enumerations import ResponseStatus
from app.repositories.base import BaseRepository


class ResponseRepository(BaseRepository):
    """Repository for assessment response sessions and their answers."""

    TABLE_NAME = "ASSESSMENT_RESPONSES"

    _COLUMNS = """
        ID, QUESTIONNAIRE_ID, RESPONDENT_NAME, RESPONDENT_EMAIL, STATUS,
        ANSWERS, STARTED_AT, COMPLETED_AT, UPDATED_AT
    """

    def create(
        self,
        questionnaire_id: str,
        respondent_name: Optional[str] = None,
        respondent_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Start a new response session.

        Args:
            questionnaire_id: Survey the session answers
            respondent_name: Optional respondent name
            respondent_email: Optional respondent email

        Returns:
            Created session dict
        """
        response_id = str(uuid4())
        now = self.utc_now()

        sql = f"""
            INSERT INTO {self.TABLE_NAME} ({self._COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params = (
            response_id,
            questionnaire_id,
            respondent_name,
            respondent_email,
            ResponseStatus.STARTED.value,
            self.to_json([]),
            now,
            None,  # completed_at
            now,
        )
        self.execute_query(sql, params, commit=True)

        return self.get_by_id(response_id)

    def get_by_id(self, response_id: str) -> Optional[Dict[str, Any]]:
        sql = f"SELECT {self._COLUMNS} FROM {self.TABLE_NAME} WHERE ID = %s"
        row = self.execute_query(sql, (str(response_id),), fetch_one=True)
        if not row:
            return None
        return self._row_to_dict(row)

    def save_answers(
        self,
        response_id: str,
        answers: List[Dict[str, Any]],
        status: ResponseStatus,
    ) -> Optional[Dict[str, Any]]:
        """Replace the stored answers and status of a session."""
        sql, params = self.build_update_query(
            self.TABLE_NAME,
            {"answers": self.to_json(answers), "status": status.value},
            "ID",
            str(response_id),
            additional_set={"updated_at": self.utc_now()},
        )
        affected = self.execute_query(sql, tuple(params), commit=True)
        if not affected:
            return None
        return self.get_by_id(response_id)

    def complete(self, response_id: str) -> Optional[Dict[str, Any]]:
        now = self.utc_now()
        sql, params = self.build_update_query(
            self.TABLE_NAME,
            {"status": ResponseStatus.COMPLETED.value, "completed_at": now},
            "ID",
            str(response_id),
            additional_set={"updated_at": now},
        )
        affected = self.execute_query(sql, tuple(params), commit=True)
        if not affected:
            return None
        return self.get_by_id(response_id)

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to dictionary."""
        return {
            "id": row["ID"],
            "questionnaire_id": row["QUESTIONNAIRE_ID"],
            "respondent_name": row["RESPONDENT_NAME"],
            "respondent_email": row["RESPONDENT_EMAIL"],
            "status": row["STATUS"],
            "answers": self.from_json(row["ANSWERS"], default=[]),
            "started_at": self.normalize_timestamp(row["STARTED_AT"]),
            "completed_at": self.normalize_timestamp(row["COMPLETED_AT"]),
            "updated_at": self.normalize_timestamp(row["UPDATED_AT"]),
        }
