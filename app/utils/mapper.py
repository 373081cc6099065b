from typing import Iterable, List

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate, ProductView


class ProductMapper:
    """
    Converts between request/response schemas and the Product record.

    All methods are pure: they never touch the session or mutate their input.
    """

    def to_record(self, product_data: ProductCreate) -> Product:
        """Build an unsaved Product from a creation request."""
        return Product(**product_data.model_dump())

    def to_view(self, product: Product) -> ProductView:
        """Map a persisted Product to its response shape."""
        return ProductView.model_validate(product)

    def to_views(self, products: Iterable[Product]) -> List[ProductView]:
        return [self.to_view(p) for p in products]

    def echo_update(self, product_data: ProductUpdate) -> ProductUpdate:
        """Return a detached copy of an update request."""
        return product_data.model_copy(deep=True)
