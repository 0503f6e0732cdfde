# storefront/utils/data_loader.py
import logging

import streamlit as st

from connectors.supabase_connector import BackendError, SupabaseConnector
from services.catalog_service import CatalogRepository
from services.models import EMPTY_SNAPSHOT
from utils.config_loader import APP_CONFIG, backend_config_error

logger = logging.getLogger(__name__)


@st.cache_resource
def get_connector():
    supabase_config = APP_CONFIG["supabase"]
    return SupabaseConnector(
        api_key=supabase_config["api_key"],
        base_url=supabase_config["base_url"],
        storage_bucket=supabase_config.get("storage_bucket", "images"),
    )


def _remember_snapshot(snapshot):
    st.session_state.catalog_snapshot = snapshot


def get_repository():
    """
    Returns this session's catalog repository, stopping the page with an error
    if the backend is not configured.
    """
    error = backend_config_error(APP_CONFIG)
    if error:
        st.error(f"Configuration Error: {error}")
        st.stop()

    if "catalog_repository" not in st.session_state:
        repository = CatalogRepository(
            get_connector(), reviews_limit=APP_CONFIG["storefront"]["reviews_limit"]
        )
        repository.subscribe(_remember_snapshot)
        st.session_state.catalog_repository = repository
    return st.session_state.catalog_repository


def load_catalog(force_refresh=False):
    """
    Returns the current catalog snapshot, fetching it on first use.
    A failed fetch is reported as a notification and the previous snapshot is kept.
    """
    repository = get_repository()
    if force_refresh or "catalog_snapshot" not in st.session_state:
        try:
            repository.refresh()
        except BackendError as e:
            logger.error(f"Catalog refresh failed: {e}")
            st.toast(f"Could not load the catalog: {e}", icon="⚠️")
    return st.session_state.get("catalog_snapshot", EMPTY_SNAPSHOT)
