from infra.db.models import Base, DailyRecordModel
from infra.db.session import (
    close_engine,
    create_database_schema,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "DailyRecordModel",
    "close_engine",
    "create_database_schema",
    "get_engine",
    "get_session_factory",
]
