# storefront/views/admin.py
"""Widgets shared by the admin manager pages."""
import streamlit as st

from connectors.supabase_connector import BackendError
from services.catalog_service import CatalogReloadError


def set_form_values(prefix, values):
    """Writes values into the widget keys '<prefix>_<field>'. Only call from a callback or before the widgets render."""
    for field, value in values.items():
        st.session_state[f"{prefix}_{field}"] = value


def form_values(prefix, fields):
    return {field: st.session_state.get(f"{prefix}_{field}") for field in fields}


def field_error(errors, field):
    message = (errors or {}).get(field)
    if message:
        st.markdown(f":red[{message}]")


def upload_image_into(repository, uploader_key, target_key):
    """Callback: uploads the file held by a file_uploader and puts its public URL into a text field."""
    uploaded = st.session_state.get(uploader_key)
    if uploaded is None:
        st.toast("Choose an image first.", icon="⚠️")
        return
    try:
        st.session_state[target_key] = repository.upload_image(uploaded)
        st.toast("Image uploaded", icon="✅")
    except BackendError as e:
        st.toast(f"Upload failed: {e}", icon="❌")


def request_delete(state_key, record_id):
    st.session_state[state_key] = record_id


def cancel_delete(state_key):
    st.session_state.pop(state_key, None)


def confirm_delete(state_key, delete, label):
    """Callback for the confirmation button. The list only changes once the backend confirms."""
    record_id = st.session_state.pop(state_key, None)
    if record_id is None:
        return
    try:
        delete(record_id)
    except CatalogReloadError as e:
        st.toast(f"{label} deleted, but the list could not be reloaded: {e}", icon="⚠️")
    except BackendError as e:
        st.toast(f"Failed to delete: {e}", icon="❌")
    else:
        st.toast(f"{label} deleted", icon="🗑️")


def render_delete_confirmation(state_key, record_id, delete, label):
    if st.session_state.get(state_key) != record_id:
        return
    st.warning(f"**Are you sure you want to permanently delete this {label.lower()}?**")
    col_confirm, col_cancel = st.columns(2)
    col_confirm.button("✅ Yes, delete it", key=f"confirm_{state_key}_{record_id}", width="stretch",
                       on_click=confirm_delete, args=(state_key, delete, label))
    col_cancel.button("❌ Cancel", key=f"cancel_{state_key}_{record_id}", width="stretch",
                      on_click=cancel_delete, args=(state_key,))
