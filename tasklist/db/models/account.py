from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from tasklist.db.base import BaseModel


class Account(BaseModel):
    __tablename__ = "accounts"

    # email хранится в нижнем регистре, уникальность без учета регистра
    email = Column(String(320), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    tasks = relationship("Task", back_populates="account")
