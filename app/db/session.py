# app/db/session.py

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def scoped_transaction(db: Session) -> Iterator[Session]:
    """
    Атомарная область записи: все изменения внутри блока фиксируются одним
    коммитом при нормальном выходе и откатываются при любом исключении.
    Исключение после отката пробрасывается дальше без изменений.
    """
    try:
        yield db
        db.commit()
    except Exception:
        logger.debug("Rolling back scoped transaction.")
        db.rollback()
        raise
