"""Tests for the catalog repository."""

from unittest import mock

import pandas as pd
import pytest

from connectors.supabase_connector import BackendError
from services.catalog_service import CatalogReloadError, CatalogRepository
from services.models import CatalogSnapshot, Creating, DashboardStats, Editing

CATEGORY_ROWS = [
    {"id": 1, "name": "Home Decor", "slug": "home-decor", "image_url": None},
    {"id": 2, "name": "Lamps", "slug": "lamps", "image_url": "https://cdn/lamps.png"},
]
PRODUCT_ROWS = [
    {"id": "p1", "name": "Brass Diya", "description": "Hand-beaten", "price": 12.5, "stock": 3,
     "category_id": 2, "image_url": None, "categories": {"name": "Lamps"}},
    {"id": "p2", "name": "Wall Hanging", "description": None, "price": "40", "stock": 0,
     "category_id": None, "image_url": "", "categories": None},
]
REVIEW_ROWS = [
    {"id": "r1", "user_name": "meera", "rating": 5, "comment": "Lovely!", "products": {"name": "Brass Diya"}},
]


def _select(table, **query):
    return {"categories": CATEGORY_ROWS, "products": PRODUCT_ROWS, "reviews": REVIEW_ROWS}[table]


@pytest.fixture
def connector() -> mock.Mock:
    fake = mock.Mock()
    fake.select_rows.side_effect = _select
    fake.insert_row.return_value = {"id": 3}
    fake.update_row.return_value = {"id": 1}
    return fake


@pytest.fixture
def repository(connector: mock.Mock) -> CatalogRepository:
    return CatalogRepository(connector, reviews_limit=6)


class TestRefresh:
    """Tests for refresh and snapshot publication."""

    def test_snapshot_starts_empty(self, repository: CatalogRepository) -> None:
        """Nothing is fetched until refresh is called."""
        assert repository.snapshot == CatalogSnapshot()

    def test_refresh_builds_records(self, repository: CatalogRepository) -> None:
        """Rows are converted into immutable records."""
        snapshot = repository.refresh()

        assert [c.slug for c in snapshot.categories] == ["home-decor", "lamps"]
        diya, hanging = snapshot.products
        assert diya.category_name == "Lamps"
        assert diya.category_id == "2"
        assert diya.in_stock
        assert hanging.price == 40.0
        assert hanging.category_name is None
        assert hanging.image_url is None
        assert not hanging.in_stock
        assert snapshot.reviews[0].product_name == "Brass Diya"
        assert snapshot.reviews[0].initial == "M"
        assert snapshot.fetched_at is not None
        assert repository.snapshot is snapshot

    def test_refresh_queries(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """Each collection is fetched with its join, ordering and limit."""
        repository.refresh()
        connector.select_rows.assert_any_call("categories", order_by="created_at", ascending=True)
        connector.select_rows.assert_any_call(
            "products", columns="*, categories(name)", order_by="created_at", ascending=False
        )
        connector.select_rows.assert_any_call(
            "reviews", columns="*, products(name)", order_by="created_at", ascending=False, limit=6
        )

    def test_snapshot_is_immutable(self, repository: CatalogRepository) -> None:
        """Snapshots cannot be modified in place."""
        snapshot = repository.refresh()
        with pytest.raises(AttributeError):
            snapshot.products = ()
        assert isinstance(snapshot.products, tuple)

    def test_subscribers_receive_new_snapshots(self, repository: CatalogRepository) -> None:
        """Subscribers get every replacement until they unsubscribe."""
        received = []
        unsubscribe = repository.subscribe(received.append)
        first = repository.refresh()
        unsubscribe()
        repository.refresh()
        assert received == [first]

    def test_failed_refresh_keeps_snapshot(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """A backend failure leaves the previous snapshot untouched."""
        before = repository.refresh()
        connector.select_rows.side_effect = BackendError("offline")
        with pytest.raises(BackendError):
            repository.refresh()
        assert repository.snapshot is before


class TestWrites:
    """Tests for save and delete operations."""

    def test_creating_inserts(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """Creating mode inserts and then re-fetches."""
        repository.save_category(Creating(), {"name": "Toys", "slug": "toys", "image_url": None})
        connector.insert_row.assert_called_once_with("categories", {"name": "Toys", "slug": "toys", "image_url": None})
        connector.update_row.assert_not_called()
        assert repository.snapshot.categories

    def test_editing_updates_by_id(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """Editing mode updates the record it carries."""
        repository.save_product(Editing(record_id="p1"), {"stock": 5})
        connector.update_row.assert_called_once_with("products", "p1", {"stock": 5})
        connector.insert_row.assert_not_called()

    def test_unknown_mode_rejected(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """Anything other than Creating or Editing is a programming error."""
        with pytest.raises(TypeError):
            repository.save_category(None, {})
        connector.insert_row.assert_not_called()

    def test_failed_write_does_not_touch_snapshot(self, repository: CatalogRepository,
                                                  connector: mock.Mock) -> None:
        """The local view only changes after a confirmed write."""
        before = repository.refresh()
        connector.select_rows.reset_mock()
        connector.insert_row.side_effect = BackendError("duplicate key")
        with pytest.raises(BackendError):
            repository.save_category(Creating(), {"name": "Lamps", "slug": "lamps"})
        assert repository.snapshot is before
        connector.select_rows.assert_not_called()

    def test_failed_refetch_after_insert(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """An applied insert is not reported as a failed write when only the re-fetch fails."""
        before = repository.refresh()
        connector.select_rows.side_effect = BackendError("Failed to fetch rows from 'categories'.")
        with pytest.raises(CatalogReloadError) as excinfo:
            repository.save_category(Creating(), {"name": "Toys", "slug": "toys", "image_url": None})
        assert not isinstance(excinfo.value, BackendError)
        assert excinfo.value.result == {"id": 3}
        connector.insert_row.assert_called_once()
        assert repository.snapshot is before

    def test_failed_refetch_after_delete(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """An applied delete followed by a failed re-fetch raises CatalogReloadError."""
        connector.select_rows.side_effect = BackendError("offline")
        with pytest.raises(CatalogReloadError, match="offline"):
            repository.delete_product("p2")
        connector.delete_row.assert_called_once_with("products", "p2")

    def test_delete_refetches(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """A confirmed delete is followed by a re-fetch."""
        repository.delete_product("p2")
        connector.delete_row.assert_called_once_with("products", "p2")
        assert repository.snapshot.fetched_at is not None

    def test_failed_delete_keeps_snapshot(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """A rejected delete leaves the list as it was."""
        before = repository.refresh()
        connector.delete_row.side_effect = BackendError("in use")
        with pytest.raises(BackendError):
            repository.delete_category("1")
        assert repository.snapshot is before

    def test_upload_image_passes_file_contents(self, repository: CatalogRepository,
                                               connector: mock.Mock) -> None:
        """Uploaded files are forwarded with their name and type."""
        uploaded = mock.Mock()
        uploaded.name = "diya.png"
        uploaded.type = "image/png"
        uploaded.getvalue.return_value = b"png"
        connector.upload_image.return_value = "https://cdn/diya.png"

        assert repository.upload_image(uploaded) == "https://cdn/diya.png"
        connector.upload_image.assert_called_once_with("diya.png", b"png", "image/png")


class TestDashboard:
    """Tests for dashboard aggregates."""

    def test_dashboard_stats(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """Counts come from the backend; missing counts read as zero."""
        connector.count_rows.side_effect = lambda table: {"products": 12, "categories": 4, "reviews": None}[table]
        assert repository.dashboard_stats() == DashboardStats(products=12, categories=4, reviews=0)

    def test_products_frame(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """The inventory frame names the category and fills in missing ones."""
        connector.get_table_as_dataframe.return_value = pd.DataFrame([
            {"id": 1, "name": "Diya", "price": 12.5, "stock": 3, "categories_name": "Lamps"},
            {"id": 2, "name": "Bowl", "price": 8.0, "stock": 0, "categories_name": None},
        ])
        df = repository.products_frame()
        assert list(df.columns) == ["name", "category", "price", "stock"]
        assert df["category"].tolist() == ["Lamps", "Uncategorized"]

    def test_products_frame_empty(self, repository: CatalogRepository, connector: mock.Mock) -> None:
        """An empty table gives an empty frame."""
        connector.get_table_as_dataframe.return_value = pd.DataFrame()
        assert repository.products_frame().empty
