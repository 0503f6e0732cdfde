# storefront/services/forms.py
"""Validation and payload building for the admin category and product forms.

Validators return a ``{field: message}`` dict. An empty dict means the form can
be submitted; otherwise each message is rendered under its field and nothing is
sent to the backend.
"""
import math

from services.models import Category, Editing, Product


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def _to_number(value, cast):
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


def validate_category(data: dict) -> dict:
    errors = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required"
    if _blank(data.get("slug")):
        errors["slug"] = "Slug is required"
    return errors


def validate_product(data: dict) -> dict:
    errors = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required"

    if _blank(data.get("price")):
        errors["price"] = "Price is required"
    else:
        price = _to_number(data.get("price"), float)
        if price is None or not math.isfinite(price):
            errors["price"] = "Price must be a number"
        elif price < 0:
            errors["price"] = "Price cannot be negative"

    if _blank(data.get("stock")):
        errors["stock"] = "Stock is required"
    else:
        stock = _to_number(data.get("stock"), float)
        if stock is None or not stock.is_integer():
            errors["stock"] = "Stock must be a whole number"
        elif stock < 0:
            errors["stock"] = "Stock cannot be negative"
    return errors


def build_category_payload(data: dict) -> dict:
    return {
        "name": data["name"].strip(),
        "slug": data["slug"].strip(),
        "image_url": None if _blank(data.get("image_url")) else data["image_url"].strip(),
    }


def build_product_payload(data: dict) -> dict:
    return {
        "name": data["name"].strip(),
        "description": (data.get("description") or "").strip(),
        "price": round(float(data["price"]), 2),
        "stock": int(float(data["stock"])),
        "category_id": None if _blank(data.get("category_id")) else data["category_id"],
        "image_url": None if _blank(data.get("image_url")) else data["image_url"].strip(),
    }


def edit_mode_for(record) -> Editing:
    """Builds the Editing mode for a record picked from the admin list."""
    if isinstance(record, Category):
        return Editing(record_id=record.id, original_slug=record.slug)
    if isinstance(record, Product):
        return Editing(record_id=record.id)
    raise TypeError(f"Cannot edit {type(record).__name__} records.")


def category_form_values(mode, snapshot) -> dict:
    """Initial field values for the category form in the given mode."""
    if isinstance(mode, Editing):
        category = snapshot.category_by_id(mode.record_id)
        if category is not None:
            return {"name": category.name, "slug": category.slug, "image_url": category.image_url or ""}
    return {"name": "", "slug": "", "image_url": ""}


def product_form_values(mode, snapshot) -> dict:
    if isinstance(mode, Editing):
        product = snapshot.product_by_id(mode.record_id)
        if product is not None:
            return {
                "name": product.name,
                "description": product.description,
                "price": product.price,
                "stock": product.stock,
                "category_id": product.category_id or "",
                "image_url": product.image_url or "",
            }
    return {"name": "", "description": "", "price": 0.0, "stock": 0, "category_id": "", "image_url": ""}

