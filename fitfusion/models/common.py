# fitfusion/models/common.py
import sqlite3
from datetime import datetime

from sqlalchemy import event
from sqlalchemy.engine import Engine

from .. import db

# BIGINT ids on MySQL; SQLite only autoincrements a plain INTEGER primary key
BigId = db.BigInteger().with_variant(db.Integer(), "sqlite")


@event.listens_for(Engine, "connect")
def _enforce_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES unless enabled per connection; MySQL always enforces them
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def utcnow():
    return datetime.utcnow()


def iso(value):
    return value.isoformat() if value else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
