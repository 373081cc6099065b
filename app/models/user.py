from sqlalchemy import Column, Integer, String

from app.database import Base


class User(Base):
    """User owning products. Only read by this service, to validate references."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
