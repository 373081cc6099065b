from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    false,
    true,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.category import Category
from app.models.user import User


class Product(Base):
    """
    Product model representing items available for sale.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        display_name: Name shown to customers
        description: Optional long description
        price: Product price (must be non-negative)
        stock: Available quantity (must be non-negative)
        category_id: Reference to the product's category
        user_id: Reference to the owning user
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
        is_active: False once the product has been soft-deleted
        is_deleted: True once the product has been soft-deleted
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    display_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)

    category = relationship(Category)
    user = relationship(User)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
    )

    @classmethod
    def visible(cls):
        """Filter clause for products that are active and not soft-deleted."""
        return (cls.is_active == true()) & (cls.is_deleted == false())

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
