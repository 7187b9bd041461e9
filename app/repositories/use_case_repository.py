"""
Use Case Repository - AI Use-Case Portfolio
app/repositories/use_case_repository.py

Data access layer for UseCase entity operations.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from app.repositories.base import BaseRepository

SCALAR_COLUMNS = [
    "id",
    "meaningful_id",
    "title",
    "description",
    "problem_statement",
    "process",
    "line_of_business",
    "business_segment",
    "geography",
    "use_case_type",
    "revenue_impact",
    "cost_savings",
    "risk_reduction",
    "broker_partner_experience",
    "strategic_fit",
    "data_readiness",
    "technical_complexity",
    "change_impact",
    "model_risk",
    "adoption_readiness",
    "impact_score",
    "effort_score",
    "quadrant",
    "manual_impact_score",
    "manual_effort_score",
    "manual_quadrant",
    "override_reason",
    "is_active_for_portfolio",
    "is_dashboard_visible",
    "library_tier",
    "library_source",
    "activation_date",
    "activation_reason",
    "deactivation_reason",
    "use_case_status",
    "recommended_by_assessment",
    "created_at",
    "updated_at",
]

# Multi-value tags, stored as JSON text
JSON_COLUMNS = ["processes", "lines_of_business", "business_segments", "geographies"]

ALL_COLUMNS = SCALAR_COLUMNS + JSON_COLUMNS
UPDATABLE_COLUMNS = set(ALL_COLUMNS) - {"id", "created_at", "updated_at"}

_SELECT_COLUMNS = ", ".join(c.upper() for c in ALL_COLUMNS)


class UseCaseRepository(BaseRepository):
    """Repository for UseCase CRUD operations."""

    TABLE_NAME = "USE_CASES"

    def _prepare(self, column: str, value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value
        if column in JSON_COLUMNS:
            return self.to_json(value or [])
        return value

    def _select(self, where_sql: str = "1=1", params: tuple = ()) -> List[Dict[str, Any]]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM {self.TABLE_NAME}
            WHERE {where_sql}
            ORDER BY CREATED_AT ASC, ID ASC
        """
        rows = self.execute_query(sql, params, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new use case.

        Args:
            data: Column values, including the derived impact/effort/quadrant

        Returns:
            Created use case dict
        """
        use_case_id = str(uuid4())
        now = self.utc_now()

        values = {column: data.get(column) for column in ALL_COLUMNS}
        values.update(id=use_case_id, created_at=now, updated_at=now)

        columns_sql = ", ".join(c.upper() for c in ALL_COLUMNS)
        placeholders = ", ".join(["%s"] * len(ALL_COLUMNS))
        sql = f"INSERT INTO {self.TABLE_NAME} ({columns_sql}) VALUES ({placeholders})"
        params = tuple(self._prepare(c, values[c]) for c in ALL_COLUMNS)

        self.execute_query(sql, params, commit=True)

        return self.get_by_id(use_case_id)

    def get_by_id(self, use_case_id: str) -> Optional[Dict[str, Any]]:
        rows = self._select("ID = %s", (str(use_case_id),))
        return rows[0] if rows else None

    def get_all(self) -> List[Dict[str, Any]]:
        """All use cases in catalog (creation) order."""
        return self._select()

    def get_dashboard(self) -> List[Dict[str, Any]]:
        return self._select("IS_DASHBOARD_VISIBLE = TRUE")

    def get_by_tier(self, library_tier: str) -> List[Dict[str, Any]]:
        return self._select("LIBRARY_TIER = %s", (library_tier,))

    def get_recommended(self, assessment_id: str) -> List[Dict[str, Any]]:
        return self._select("RECOMMENDED_BY_ASSESSMENT = %s", (assessment_id,))

    def update(self, use_case_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update the given columns of a use case.

        Args:
            use_case_id: ID of the use case
            data: Column -> value (unknown columns are ignored)

        Returns:
            Updated use case dict or None if not found
        """
        update_data = {
            column: self._prepare(column, value)
            for column, value in data.items()
            if column in UPDATABLE_COLUMNS
        }
        if not update_data:
            return self.get_by_id(use_case_id)

        sql, params = self.build_update_query(
            self.TABLE_NAME,
            update_data,
            "ID",
            str(use_case_id),
            additional_set={"updated_at": self.utc_now()},
        )
        affected = self.execute_query(sql, tuple(params), commit=True)
        if not affected:
            return None

        return self.get_by_id(use_case_id)

    def delete(self, use_case_id: str) -> bool:
        """Hard delete. Returns False when no row matched."""
        sql = f"DELETE FROM {self.TABLE_NAME} WHERE ID = %s"
        affected = self.execute_query(sql, (str(use_case_id),), commit=True)
        return bool(affected)

    def bulk_update_tier(self, use_case_ids: List[str], library_tier: str) -> int:
        if not use_case_ids:
            return 0
        placeholders = ", ".join(["%s"] * len(use_case_ids))
        sql = f"""
            UPDATE {self.TABLE_NAME}
            SET LIBRARY_TIER = %s,
                IS_ACTIVE_FOR_PORTFOLIO = %s,
                UPDATED_AT = %s
            WHERE ID IN ({placeholders})
        """
        params = (library_tier, library_tier == "active", self.utc_now(), *[str(i) for i in use_case_ids])
        return self.execute_query(sql, params, commit=True) or 0

    def apply_recommendations(self, assessment_id: str, use_case_ids: List[str]) -> int:
        """Mark use cases as recommended by an assessment."""
        if not use_case_ids:
            return 0
        placeholders = ", ".join(["%s"] * len(use_case_ids))
        sql = f"""
            UPDATE {self.TABLE_NAME}
            SET RECOMMENDED_BY_ASSESSMENT = %s
            WHERE ID IN ({placeholders})
        """
        params = (assessment_id, *[str(i) for i in use_case_ids])
        return self.execute_query(sql, params, commit=True) or 0

    def clear_recommendations(self, assessment_id: str) -> int:
        sql = f"""
            UPDATE {self.TABLE_NAME}
            SET RECOMMENDED_BY_ASSESSMENT = NULL
            WHERE RECOMMENDED_BY_ASSESSMENT = %s
        """
        return self.execute_query(sql, (assessment_id,), commit=True) or 0

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to dictionary."""
        data = self.row_to_dict(row)
        for column in JSON_COLUMNS:
            data[column] = self.from_json(data.get(column), default=[])
        for column in ("activation_date", "created_at", "updated_at"):
            data[column] = self.normalize_timestamp(data.get(column))
        for column in ("impact_score", "effort_score", "manual_impact_score", "manual_effort_score"):
            if data.get(column) is not None:
                data[column] = float(data[column])
        return data
