"""
User model.

Users log in with their username. The password column only ever holds a
bcrypt hash and is never selected into a response.
"""

from sqlalchemy import Column, String, Text, Boolean, false
from jobly.core.database import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
