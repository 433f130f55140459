import uuid

from sqlalchemy import Column, DateTime, Integer, Uuid
from sqlalchemy.orm import declarative_base

from tasklist.core.clock import utcnow

# Базовый класс для моделей
Base = declarative_base()


class BaseModel(Base):
    """Общие колонки: суррогатный id, публичный uuid и время создания"""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid(as_uuid=True), unique=True, index=True, nullable=False, default=uuid.uuid4)
    created_at = Column(DateTime, nullable=False, default=utcnow)
