from app.database import SessionLocal
from app.services.product_service import ProductService
from app.utils.mapper import ProductMapper

_mapper = ProductMapper()


def get_product_service() -> ProductService:
    """Dependency providing a ProductService bound to the application database."""
    return ProductService(_mapper, SessionLocal)
