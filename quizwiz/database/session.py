# quizwiz/database/session.py
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from quizwiz.core import config


def make_engine(url: str) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(config.DB_URL)


def init_db(bind: Optional[Engine] = None):
    from quizwiz.database import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session(bind: Optional[Engine] = None) -> Session:
    return Session(bind or engine, expire_on_commit=False)
