from sqlalchemy import Column, Integer, String

from app.database import Base


class Category(Base):
    """Product category. Only read by this service, to validate references."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
