# -*- coding: utf-8 -*-
# epdconsole/core/db.py – SQLite + SQLAlchemy (historia komunikatów statusu)
from sqlalchemy import create_engine, Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import sessionmaker, declarative_base
from datetime import datetime, timezone
from epdconsole.core.config import settings

engine = create_engine(f"sqlite:///{settings.db_path}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(bind=engine)
Base = declarative_base()

def init_db():
    Base.metadata.create_all(bind=engine)

def _utcnow():
    return datetime.now(timezone.utc)

# MODELE
class EventLog(Base):
    __tablename__ = "event_log"
    id = Column(Integer, primary_key=True)
    ts = Column(DateTime, default=_utcnow)
    level = Column(String, index=True)  # info/success/error
    event = Column(String)       # treść komunikatu
    source = Column(String, index=True, default="system")  # config/dashboard/wifi/actions/system
    meta = Column(JSON, nullable=True)
