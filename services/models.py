# storefront/services/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            slug=row.get("slug") or "",
            image_url=row.get("image_url") or None,
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str = ""
    price: float = 0.0
    stock: int = 0
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    category_name: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @classmethod
    def from_row(cls, row):
        # The joined relation comes back as {"name": ...} or null
        category = row.get("categories") or {}
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            description=row.get("description") or "",
            price=float(row.get("price") or 0),
            stock=int(row.get("stock") or 0),
            category_id=str(row["category_id"]) if row.get("category_id") else None,
            image_url=row.get("image_url") or None,
            category_name=category.get("name"),
        )


@dataclass(frozen=True)
class Review:
    id: str
    user_name: str
    rating: int
    comment: str
    product_name: Optional[str] = None

    @property
    def initial(self) -> str:
        return self.user_name[:1].upper()

    @classmethod
    def from_row(cls, row):
        product = row.get("products") or {}
        return cls(
            id=str(row["id"]),
            user_name=row.get("user_name") or "",
            rating=int(row.get("rating") or 0),
            comment=row.get("comment") or "",
            product_name=product.get("name"),
        )


@dataclass(frozen=True)
class DashboardStats:
    products: int = 0
    categories: int = 0
    reviews: int = 0


@dataclass(frozen=True)
class CatalogSnapshot:
    """Point-in-time view of the catalog. Replaced wholesale, never mutated."""

    categories: Tuple[Category, ...] = ()
    products: Tuple[Product, ...] = ()
    reviews: Tuple[Review, ...] = ()
    fetched_at: Optional[datetime] = None

    def category_by_id(self, category_id):
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def product_by_id(self, product_id):
        for product in self.products:
            if product.id == product_id:
                return product
        return None


EMPTY_SNAPSHOT = CatalogSnapshot()


# --- FORM MODE ---
@dataclass(frozen=True)
class Creating:
    """The admin form is creating a new record."""


@dataclass(frozen=True)
class Editing:
    """The admin form is editing an existing record."""

    record_id: str
    original_slug: Optional[str] = field(default=None)


FormMode = Union[Creating, Editing]
