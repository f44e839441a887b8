"""
User account database model
"""
from sqlalchemy import Column, String, DateTime
from datetime import datetime

from jobdesk.core.database import Base, generate_id
from jobdesk.core.permissions import DEFAULT_ROLE


class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=generate_id)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(200), unique=True, nullable=False, index=True)  # stored lowercase
    password = Column(String(100), nullable=False)  # bcrypt hash
    role = Column(String(30), nullable=False, default=DEFAULT_ROLE.value)
    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
