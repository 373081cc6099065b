from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

SORTABLE_FIELDS = (
    "id",
    "name",
    "display_name",
    "price",
    "stock",
    "category_id",
    "user_id",
    "created_at",
    "updated_at",
)


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    display_name: str = Field(..., min_length=1, max_length=255, description="Name shown to customers")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., ge=0, description="Product price (must be non-negative)")
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")
    category_id: int = Field(..., description="ID of an existing category")
    user_id: int = Field(..., description="ID of the owning user")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    model_config = ConfigDict(extra="ignore")

    @field_validator("name", "display_name")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class ProductUpdate(BaseModel):
    """
    Schema for updating an existing product.

    Zero numbers and blank strings mean "keep the stored value".
    """
    name: Optional[str] = Field(None, max_length=255, description="Product name")
    display_name: Optional[str] = Field(None, max_length=255, description="Name shown to customers")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(0, ge=0, description="Product price")
    stock: int = Field(0, ge=0, description="Available stock")
    category_id: int = Field(0, description="ID of an existing category")
    user_id: int = Field(0, description="ID of an existing user")


class ProductView(ProductBase):
    """Schema for product response including all fields."""
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    is_active: bool
    is_deleted: bool

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for product list response. Page fields are unset for unpaged listings."""
    items: list[ProductView]
    total: int
    page: Optional[int] = None
    page_size: Optional[int] = None
    total_pages: Optional[int] = None


class SortSpec(BaseModel):
    """Field and direction used to order product listings."""
    field: str = Field(..., description="Product column to sort by")
    descending: bool = False

    @field_validator("field")
    @classmethod
    def check_sortable(cls, v: str) -> str:
        v = v.strip()
        if v not in SORTABLE_FIELDS:
            raise ValueError(
                f"Cannot sort by '{v}'. Allowed fields: {', '.join(SORTABLE_FIELDS)}"
            )
        return v

    @classmethod
    def parse(cls, value: str) -> "SortSpec":
        """
        Build a sort spec from its query-string form.

        Accepts ``price``, ``-price`` (descending), ``price asc`` and
        ``price desc``.
        """
        value = value.strip()
        if value.startswith("-"):
            return cls(field=value[1:], descending=True)

        parts = value.split()
        if len(parts) == 2 and parts[1].lower() in ("asc", "desc"):
            return cls(field=parts[0], descending=parts[1].lower() == "desc")

        return cls(field=value)
