# storefront/services/catalog_service.py
import logging
import threading
from datetime import datetime
from typing import Callable, List

from connectors.supabase_connector import BackendError
from services.models import (
    EMPTY_SNAPSHOT,
    CatalogSnapshot,
    Category,
    Creating,
    DashboardStats,
    Editing,
    Product,
    Review,
)

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "categories"
PRODUCTS_TABLE = "products"
REVIEWS_TABLE = "reviews"


class CatalogReloadError(Exception):
    """
    The write went through but the catalog could not be re-fetched afterwards.
    The snapshot is stale until the next refresh; ``result`` holds what the write returned.
    """

    def __init__(self, message, result=None):
        super().__init__(message)
        self.result = result


class CatalogRepository:
    """
    Single owner of catalog state. Pages read ``snapshot`` and subscribe to
    replacements; the snapshot only changes after the backend confirmed a write
    and the catalog was re-fetched.
    """

    def __init__(self, connector, reviews_limit=6):
        self.connector = connector
        self.reviews_limit = reviews_limit
        self._snapshot = EMPTY_SNAPSHOT
        self._subscribers: List[Callable[[CatalogSnapshot], None]] = []
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def subscribe(self, callback):
        """
        Registers a callback invoked with every new snapshot.
        :return: A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, snapshot):
        with self._lock:
            self._snapshot = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)

    # --- READS ---
    def fetch_categories(self):
        rows = self.connector.select_rows(CATEGORIES_TABLE, order_by="created_at", ascending=True)
        return tuple(Category.from_row(row) for row in rows)

    def fetch_products(self):
        rows = self.connector.select_rows(
            PRODUCTS_TABLE, columns="*, categories(name)", order_by="created_at", ascending=False
        )
        return tuple(Product.from_row(row) for row in rows)

    def fetch_reviews(self):
        rows = self.connector.select_rows(
            REVIEWS_TABLE, columns="*, products(name)", order_by="created_at", ascending=False,
            limit=self.reviews_limit,
        )
        return tuple(Review.from_row(row) for row in rows)

    def refresh(self) -> CatalogSnapshot:
        """Re-fetches everything and replaces the snapshot. A failed fetch leaves the old one in place."""
        snapshot = CatalogSnapshot(
            categories=self.fetch_categories(),
            products=self.fetch_products(),
            reviews=self.fetch_reviews(),
            fetched_at=datetime.now(),
        )
        logger.info(
            f"Catalog refreshed: {len(snapshot.categories)} categories, "
            f"{len(snapshot.products)} products, {len(snapshot.reviews)} reviews."
        )
        self._publish(snapshot)
        return snapshot

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            products=self.connector.count_rows(PRODUCTS_TABLE) or 0,
            categories=self.connector.count_rows(CATEGORIES_TABLE) or 0,
            reviews=self.connector.count_rows(REVIEWS_TABLE) or 0,
        )

    # --- WRITES ---
    def _save(self, table, mode, payload):
        if isinstance(mode, Editing):
            row = self.connector.update_row(table, mode.record_id, payload)
        elif isinstance(mode, Creating):
            row = self.connector.insert_row(table, payload)
        else:
            raise TypeError(f"Unknown form mode: {mode!r}")
        return self._refresh_after_write(f"Saving to '{table}'", row)

    def _refresh_after_write(self, action, result=None):
        try:
            self.refresh()
        except BackendError as e:
            logger.error(f"{action} succeeded but the catalog could not be re-fetched: {e}")
            raise CatalogReloadError(str(e), result) from e
        return result

    def save_category(self, mode, payload):
        """
        Inserts or updates a category depending on the form mode, then re-fetches.
        :raises BackendError: The write was rejected and nothing changed.
        :raises CatalogReloadError: The write was applied but the re-fetch failed.
        """
        return self._save(CATEGORIES_TABLE, mode, payload)

    def save_product(self, mode, payload):
        return self._save(PRODUCTS_TABLE, mode, payload)

    def delete_category(self, category_id):
        self.connector.delete_row(CATEGORIES_TABLE, category_id)
        self._refresh_after_write(f"Deleting category {category_id}")

    def delete_product(self, product_id):
        self.connector.delete_row(PRODUCTS_TABLE, product_id)
        self._refresh_after_write(f"Deleting product {product_id}")

    def upload_image(self, uploaded_file):
        """Stores a Streamlit UploadedFile and returns its public URL."""
        return self.connector.upload_image(
            uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type or "application/octet-stream"
        )

    def products_frame(self):
        """Inventory table for the dashboard: one row per product with its category name."""
        df = self.connector.get_table_as_dataframe(
            PRODUCTS_TABLE, columns="id, name, price, stock, categories(name)", order_by="name"
        )
        if df.empty:
            return df
        if "categories_name" not in df.columns:
            df["categories_name"] = None
        df = df.rename(columns={"categories_name": "category"})
        df["category"] = df["category"].fillna("Uncategorized")
        return df[["name", "category", "price", "stock"]]
