# storefront/services/cart.py
from dataclasses import dataclass


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: float
    quantity: int

    @property
    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)


class Cart:
    """In-memory cart for the current browser session. Nothing is persisted."""

    def __init__(self):
        self._lines = {}

    def add(self, product, quantity=1):
        if quantity <= 0:
            raise ValueError("Quantity must be positive.")
        existing = self._lines.get(product.id)
        held = existing.quantity if existing else 0
        self._lines[product.id] = CartLine(product.id, product.name, product.price, held + quantity)

    def remove(self, product_id):
        self._lines.pop(product_id, None)

    def clear(self):
        self._lines.clear()

    @property
    def lines(self):
        return tuple(self._lines.values())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total(self) -> float:
        return round(sum(line.subtotal for line in self._lines.values()), 2)
