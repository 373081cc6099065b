from sqlalchemy.orm import Session, joinedload
from datetime import datetime
from typing import Optional
import logging

from app.database import SessionLocal, session_scope
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate, ProductView, SortSpec
from app.schemas.result import ServiceResult
from app.services.validators import is_valid_category, is_valid_user
from app.utils.mapper import ProductMapper

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations.

    Every public method runs in its own unit of work: a session is opened
    from ``session_factory``, used, and closed before returning. Results are
    wrapped in a ``ServiceResult``; a missing product, user or category is
    reported through ``is_success=False`` and ``exception_message``, never
    raised. Database errors propagate.

    Only active, non-deleted products are visible to the read operations.
    Deleting is a soft delete.
    """

    def __init__(self, mapper: ProductMapper, session_factory=SessionLocal):
        self.mapper = mapper
        self.session_factory = session_factory

    def insert(self, new_product: ProductCreate) -> ServiceResult[ProductView]:
        """
        Create a new product after checking its user and category exist.

        The user is checked before the category. Identical requests create
        independent products.

        Args:
            new_product: Product creation data

        Returns:
            Result holding the created product, or the missing reference message
        """
        result = ServiceResult[ProductView]()
        product = self.mapper.to_record(new_product)

        with session_scope(self.session_factory) as db:
            message = self._check_references(db, product.user_id, product.category_id)
            if message:
                result.exception_message = message
                return result

            product.created_at = datetime.now()
            product.is_active = True
            product.is_deleted = False
            db.add(product)
            db.commit()

            result.entity = self.mapper.to_view(product)
            result.is_success = True
            logger.info(f"Product #{product.id} created by user #{product.user_id}")

        return result

    def get(self, page_number: int, page_size: int) -> ServiceResult[ProductView]:
        """
        Get one page of visible products ordered by ID.

        Args:
            page_number: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Result holding the page and the count of all visible products.
            A page number or size below 1 gives an empty page.
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            query = self._visible_query(db).order_by(Product.id.asc())
            result.items = self.mapper.to_views(self._page(query, page_number, page_size))
            result.total_count = self._visible_count(db)
            result.is_success = True

        return result

    def get_sorted(self, sort: SortSpec) -> ServiceResult[ProductView]:
        """
        Get all visible products in sorted order.

        Args:
            sort: Field and direction to order by

        Returns:
            Result holding every visible product and their count
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            query = self._order(self._visible_query(db), sort)
            result.items = self.mapper.to_views(query.all())
            result.total_count = self._visible_count(db)
            result.is_success = True

        return result

    def get_pages_sorted(
        self,
        page_number: int,
        page_size: int,
        sort: SortSpec
    ) -> ServiceResult[ProductView]:
        """
        Get one page of visible products, sorted before paging.

        Args:
            page_number: Page number (1-indexed)
            page_size: Number of items per page
            sort: Field and direction to order by

        Returns:
            Result holding the page and the count of all visible products
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            query = self._order(self._visible_query(db), sort)
            result.items = self.mapper.to_views(self._page(query, page_number, page_size))
            result.total_count = self._visible_count(db)
            result.is_success = True

        return result

    def get_filtered(self, min_price: float, max_price: float) -> ServiceResult[ProductView]:
        """
        Get visible products priced within [min_price, max_price], cheapest first.

        Args:
            min_price: Lowest price (inclusive)
            max_price: Highest price (inclusive)

        Returns:
            Result holding the matching products. ``total_count`` counts
            every visible product, not only the ones inside the price range.
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            query = (
                self._visible_query(db)
                .filter(Product.price >= min_price, Product.price <= max_price)
                .order_by(Product.price.asc(), Product.id.asc())
            )
            result.items = self.mapper.to_views(query.all())
            result.total_count = self._visible_count(db)
            result.is_success = True

        return result

    def get_by_id(self, product_id: int) -> ServiceResult[ProductView]:
        """
        Get a visible product by ID.

        Args:
            product_id: Product ID to look up

        Returns:
            Result holding the product, or a not-found message when it is
            missing, inactive or deleted
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            product = (
                self._visible_query(db)
                .filter(Product.id == product_id)
                .one_or_none()
            )
            if product is None:
                result.exception_message = self._not_found(product_id)
                return result

            result.entity = self.mapper.to_view(product)
            result.is_success = True

        return result

    def update(self, updated_product: ProductUpdate, product_id: int) -> ServiceResult[ProductUpdate]:
        """
        Update an existing product.

        Inactive and deleted products can still be updated. The user and
        category IDs of the payload must exist. Numeric fields left at zero
        and text fields left blank keep their stored value; the owning user
        never changes.

        Args:
            updated_product: Update data
            product_id: ID of product to update

        Returns:
            The update payload as received, not the merged record
        """
        result = ServiceResult[ProductUpdate]()

        with session_scope(self.session_factory) as db:
            product = db.query(Product).filter(Product.id == product_id).first()
            if product is None:
                result.exception_message = self._not_found(product_id)
                return result

            message = self._check_references(
                db, updated_product.user_id, updated_product.category_id
            )
            if message:
                result.exception_message = message
                return result

            product.updated_at = datetime.now()
            product.category_id = updated_product.category_id or product.category_id
            product.price = updated_product.price or product.price
            product.stock = updated_product.stock or product.stock
            product.description = self._keep_if_blank(updated_product.description, product.description)
            product.name = self._keep_if_blank(updated_product.name, product.name)
            product.display_name = self._keep_if_blank(updated_product.display_name, product.display_name)
            db.commit()

            result.entity = self.mapper.echo_update(updated_product)
            result.is_success = True
            logger.info(f"Product #{product_id} updated")

        return result

    def delete(self, product_id: int) -> ServiceResult[ProductView]:
        """
        Soft-delete a product.

        Args:
            product_id: ID of product to delete

        Returns:
            Result holding the deleted product, or a not-found message when
            it does not exist or is already deleted
        """
        result = ServiceResult[ProductView]()

        with session_scope(self.session_factory) as db:
            product = db.query(Product).filter(Product.id == product_id).first()
            if product is None or product.is_deleted:
                result.exception_message = self._not_found(product_id)
                return result

            product.is_deleted = True
            product.is_active = False
            db.commit()

            result.entity = self.mapper.to_view(product)
            result.is_success = True
            logger.info(f"Product #{product_id} deleted")

        return result

    @staticmethod
    def _visible_query(db: Session):
        return (
            db.query(Product)
            .options(joinedload(Product.category), joinedload(Product.user))
            .filter(Product.visible())
        )

    @staticmethod
    def _visible_count(db: Session) -> int:
        return db.query(Product).filter(Product.visible()).count()

    @staticmethod
    def _order(query, sort: SortSpec):
        column = getattr(Product, sort.field)
        primary = column.desc() if sort.descending else column.asc()
        # id keeps pages stable when sort values repeat
        return query.order_by(primary, Product.id.asc())

    @staticmethod
    def _page(query, page_number: int, page_size: int) -> list:
        if page_number < 1 or page_size < 1:
            return []
        return query.offset((page_number - 1) * page_size).limit(page_size).all()

    @staticmethod
    def _check_references(db: Session, user_id: int, category_id: int) -> Optional[str]:
        """Return a not-found message for the first missing reference, if any."""
        if not is_valid_user(db, user_id):
            logger.warning(f"User #{user_id} not found")
            return f"User with id:{user_id} is not found"
        if not is_valid_category(db, category_id):
            logger.warning(f"Category #{category_id} not found")
            return f"Category with id:{category_id} is not found"
        return None

    @staticmethod
    def _not_found(product_id: int) -> str:
        logger.warning(f"Product #{product_id} not found")
        return f"Product with id:{product_id} is not found"

    @staticmethod
    def _keep_if_blank(value: Optional[str], current: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return current
        return value
