"""
Database models for the bet journal
SQLAlchemy ORM, SQLite by default

The journal stores whole JSON documents under fixed string keys (bets,
bankroll, cycle state, allocation state).  There is one table and no
partial updates: every write replaces the document for its key.
"""

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///betjournal.db")

# check_same_thread=False: Streamlit reruns scripts on worker threads
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class Document(Base):
    """A JSON document addressed by a fixed key"""

    __tablename__ = "documents"

    key = Column(String, primary_key=True, index=True)
    payload = Column(Text, nullable=False)  # JSON-serialized document

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
