# storefront/connectors/supabase_connector.py
import logging
import uuid

import pandas as pd
import requests

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A call to the hosted backend failed. The message is safe to show to the user."""


class SupabaseConnector:
    def __init__(self, api_key, base_url, storage_bucket="images", timeout=15):
        if not api_key:
            logger.error("Supabase API key is not provided.")
            raise ValueError("Supabase API key is required.")
        if not base_url:
            logger.error("Supabase URL is not provided.")
            raise ValueError("Supabase URL is required.")
        self.base_url = base_url.rstrip('/')
        self.storage_bucket = storage_bucket
        self.timeout = timeout
        self.headers = {"apikey": api_key, "Authorization": f"Bearer {api_key}"}

    def _table_url(self, table):
        return f"{self.base_url}/rest/v1/{table}"

    def _raise_backend_error(self, action, error):
        detail = ""
        response = getattr(error, "response", None)
        if response is not None:
            try:
                body = response.json()
                detail = body.get("message", "") if isinstance(body, dict) else ""
            except ValueError:
                detail = response.text
        logger.error(f"Failed to {action}: {error} - Response: {detail}")
        raise BackendError(detail or f"Failed to {action}.") from error

    # --- READ ---
    def select_rows(self, table, columns="*", order_by=None, ascending=True, limit=None):
        """
        Fetches rows from a table, optionally joined, ordered and limited.
        :param table: The table name, e.g. 'products'.
        :param columns: PostgREST select list. Embedded joins look like '*, categories(name)'.
        :param order_by: Column to order by, e.g. 'created_at'.
        :param ascending: Sort direction for order_by.
        :param limit: Maximum number of rows to return.
        :return: A list of row dictionaries.
        """
        params = {"select": columns.replace(" ", "")}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        if limit is not None:
            params["limit"] = int(limit)
        try:
            response = requests.get(self._table_url(table), headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            rows = response.json() or []
        except (requests.exceptions.RequestException, ValueError) as e:
            self._raise_backend_error(f"fetch rows from '{table}'", e)
        logger.info(f"Fetched {len(rows)} row(s) from table '{table}'.")
        return rows

    def get_table_as_dataframe(self, table, **query):
        rows = self.select_rows(table, **query)
        if not rows:
            logger.warning(f"No data found in table '{table}'.")
            return pd.DataFrame()

        df = pd.DataFrame(rows)

        # Flatten embedded join objects, e.g. categories={'name': 'Decor'} -> categories_name
        for col in list(df.columns):
            if df[col].apply(lambda x: isinstance(x, dict)).any():
                nested = pd.json_normalize(df[col].apply(lambda x: x if isinstance(x, dict) else {}).tolist())
                nested.columns = [f"{col}_{name}" for name in nested.columns]
                nested.index = df.index
                df = pd.concat([df.drop(columns=[col]), nested], axis=1)
        return df

    def count_rows(self, table):
        """Returns the exact row count of a table, read from the Content-Range header."""
        headers = {**self.headers, "Prefer": "count=exact"}
        try:
            response = requests.head(self._table_url(table), headers=headers, params={"select": "*"}, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self._raise_backend_error(f"count rows in '{table}'", e)
        content_range = response.headers.get("Content-Range", "")
        total = content_range.rpartition("/")[2]
        return int(total) if total.isdigit() else 0

    # --- WRITE ---
    def insert_row(self, table, data):
        """
        Inserts one row.
        :return: The created row as returned by the API.
        """
        headers = {**self.headers, "Prefer": "return=representation"}
        try:
            response = requests.post(self._table_url(table), headers=headers, json=[data], timeout=self.timeout)
            response.raise_for_status()
            created = response.json() or [{}]
        except (requests.exceptions.RequestException, ValueError) as e:
            self._raise_backend_error(f"insert a row into '{table}'", e)
        logger.info(f"Successfully created a row in table '{table}'.")
        return created[0]

    def update_row(self, table, row_id, fields):
        """
        Updates one row by id with a partial set of fields.
        :return: The updated row as returned by the API.
        """
        headers = {**self.headers, "Prefer": "return=representation"}
        params = {"id": f"eq.{row_id}"}
        try:
            response = requests.patch(self._table_url(table), headers=headers, params=params, json=fields, timeout=self.timeout)
            response.raise_for_status()
            updated = response.json() or []
        except (requests.exceptions.RequestException, ValueError) as e:
            self._raise_backend_error(f"update row {row_id} in '{table}'", e)
        if not updated:
            logger.error(f"Row {row_id} not found in table '{table}' during update.")
            raise BackendError(f"Record {row_id} no longer exists.")
        logger.info(f"Successfully updated row {row_id} in table '{table}'.")
        return updated[0]

    def delete_row(self, table, row_id):
        params = {"id": f"eq.{row_id}"}
        try:
            response = requests.delete(self._table_url(table), headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self._raise_backend_error(f"delete row {row_id} from '{table}'", e)
        logger.info(f"Successfully deleted row {row_id} from table '{table}'.")

    # --- STORAGE ---
    def public_url(self, object_path):
        return f"{self.base_url}/storage/v1/object/public/{self.storage_bucket}/{object_path}"

    def upload_image(self, file_name, data, content_type="application/octet-stream"):
        """
        Uploads an image to the public storage bucket.
        :param file_name: Original file name; only its extension is kept.
        :param data: Raw file bytes.
        :param content_type: MIME type sent with the upload.
        :return: The publicly addressable URL of the stored image.
        """
        extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "bin"
        object_path = f"uploads/{uuid.uuid4().hex}.{extension}"
        url = f"{self.base_url}/storage/v1/object/{self.storage_bucket}/{object_path}"
        headers = {**self.headers, "Content-Type": content_type, "x-upsert": "false"}
        try:
            response = requests.post(url, headers=headers, data=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self._raise_backend_error(f"upload '{file_name}'", e)
        logger.info(f"Uploaded '{file_name}' to bucket '{self.storage_bucket}' as {object_path}.")
        return self.public_url(object_path)
