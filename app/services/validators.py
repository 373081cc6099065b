from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.user import User


def is_valid_user(db: Session, user_id: int) -> bool:
    """Check that a user with the given ID exists."""
    return db.query(User.id).filter(User.id == user_id).first() is not None


def is_valid_category(db: Session, category_id: int) -> bool:
    """Check that a category with the given ID exists."""
    return db.query(Category.id).filter(Category.id == category_id).first() is not None
