"""
Snowflake Connection - AI Use-Case Portfolio
app/services/snowflake.py

Connection factory used by the repositories (one connection per operation).
"""

import logging

import snowflake.connector

from app.config import settings
from app.core.exceptions import DatabaseConnectionException

logger = logging.getLogger(__name__)


def get_snowflake_connection():
    """
    Open a Snowflake connection from settings.

    Raises:
        DatabaseConnectionException: if Snowflake credentials are not configured.
    """
    if not settings.snowflake_configured:
        raise DatabaseConnectionException("Snowflake credentials are not configured")

    logger.debug("Opening Snowflake connection to account %s", settings.SNOWFLAKE_ACCOUNT)
    return snowflake.connector.connect(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=settings.SNOWFLAKE_PASSWORD.get_secret_value(),
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        role=settings.SNOWFLAKE_ROLE,
    )
