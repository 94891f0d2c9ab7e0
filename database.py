"""Database setup and models for the treasure map.

This module provides the database connection, models, and utilities
for treasures, users and their discoveries using SQLAlchemy.
"""

import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Database setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./treasure_map.db")


def make_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class TreasureRow(Base):
    """A treasure on the map.

    Attributes:
        id: UUID string primary key.
        name: Display name.
        clue: Clue text used for search.
        x: X coordinate in reference map pixels.
        y: Y coordinate in reference map pixels.
        description: Longer description.
        picture_url: Optional picture for the detail modal.
    """

    __tablename__ = "treasures"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    clue = Column(Text, nullable=False)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    description = Column(Text, nullable=False, default="")
    picture_url = Column(Text, nullable=True)


class UserRow(Base):
    """A registered user of the auth provider."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(254), nullable=False, unique=True, index=True)
    password_hash = Column(String(256), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserDiscoveryRow(Base):
    """The fact that a user has found a treasure.

    The (user_id, treasure_id) pair is unique; the autoincrement id keeps
    discoveries in the order they were made.
    """

    __tablename__ = "user_discoveries"
    __table_args__ = (UniqueConstraint("user_id", "treasure_id", name="uq_user_treasure"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    treasure_id = Column(String(36), ForeignKey("treasures.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


def init_db(bind=None):
    """Initialize the database by creating all tables."""
    Base.metadata.create_all(bind=bind or engine)


def seed_treasures(config: Dict[str, Any], session_factory=None) -> int:
    """Insert the configured treasures if the treasures table is empty.

    Args:
        config: Loaded configuration; its "treasures" list is used.
        session_factory: Optional sessionmaker, defaults to SessionLocal.

    Returns:
        Number of treasures inserted.
    """
    db = (session_factory or SessionLocal)()
    try:
        if db.query(TreasureRow).first() is not None:
            return 0

        rows = [
            TreasureRow(
                id=t.get("id") or new_id(),
                name=t["name"],
                clue=t["clue"],
                x=t["x"],
                y=t["y"],
                description=t.get("description", ""),
                picture_url=t.get("picture_url"),
            )
            for t in config.get("treasures", [])
        ]
        db.add_all(rows)
        db.commit()
        logger.info("Seeded %d treasures", len(rows))
        return len(rows)
    finally:
        db.close()
