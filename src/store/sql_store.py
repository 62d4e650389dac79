"""
SQLAlchemy implementation of the match store.
Defaults to an embedded SQLite file; any SQLAlchemy URL works.
"""

import logging
from typing import List, Optional

from sqlalchemy import Column, Integer, String, create_engine, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from src.errors import StoreError
from src.models import Match, MatchPayload
from src.store.base import MatchStore

logger = logging.getLogger(__name__)

Base = declarative_base()


class MatchRow(Base):
    __tablename__ = "matches"
    # ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String, nullable=False, index=True)
    time = Column(String, nullable=True)
    club = Column(String, nullable=False)
    team = Column(String, nullable=False)
    result = Column(String, nullable=True)
    status = Column(String, nullable=True, default="Pending")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "club": self.club,
            "team": self.team,
            "result": self.result,
            "status": self.status,
        }


class SqlMatchStore(MatchStore):
    """Match store backed by a relational database through SQLAlchemy"""

    backend = "local"

    def __init__(self, database_url: str):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        try:
            self.engine = create_engine(database_url, connect_args=connect_args)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not open database {database_url}") from e
        self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        logger.info(f"SQL match store ready at {self.engine.url.render_as_string(hide_password=True)}")

    def list_all(self) -> List[Match]:
        try:
            with self.Session() as session:
                rows = session.scalars(
                    select(MatchRow).order_by(MatchRow.date.desc(), MatchRow.id.desc())
                ).all()
                return [Match.from_row(row.to_dict()) for row in rows]
        except SQLAlchemyError as e:
            raise StoreError("Failed to list matches") from e

    def insert(self, payload: MatchPayload) -> Match:
        try:
            with self.Session.begin() as session:
                row = MatchRow(**payload.to_record())
                session.add(row)
                session.flush()
                data = row.to_dict()
        except SQLAlchemyError as e:
            raise StoreError("Failed to insert match") from e
        logger.info(f"Inserted match {data['id']}")
        return Match.from_row(data)

    def update(self, match_id: int, payload: MatchPayload) -> Optional[Match]:
        try:
            with self.Session.begin() as session:
                row = session.get(MatchRow, match_id)
                if row is None:
                    return None
                for field, value in payload.to_record().items():
                    setattr(row, field, value)
                session.flush()
                data = row.to_dict()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update match {match_id}") from e
        logger.info(f"Updated match {match_id}")
        return Match.from_row(data)

    def delete(self, match_id: int) -> bool:
        try:
            with self.Session.begin() as session:
                row = session.get(MatchRow, match_id)
                if row is None:
                    return False
                session.delete(row)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete match {match_id}") from e
        logger.info(f"Deleted match {match_id}")
        return True

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
