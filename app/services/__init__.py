"""
Services module for the HR Assessment Scoring Engine.

Service modules are imported directly (app.services.recalculation_service,
app.services.submission_service) since they depend on repositories, which in
turn depend on app.services.snowflake.
"""

from app.services.snowflake import get_snowflake_connection

__all__ = [
    "get_snowflake_connection",
]
