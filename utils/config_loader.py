# storefront/utils/config_loader.py
import copy
import logging
import os

import streamlit as st
import yaml

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

SETTINGS_FILE = "settings.yaml"

DEFAULT_CONFIG = {
    "supabase": {
        "base_url": None,
        "api_key": None,
        "storage_bucket": "images",
    },
    "storefront": {
        "brand_name": "Prasanthi Crafts",
        "maintenance_mode": False,
        "reviews_limit": 6,
    },
    "carousel": {
        "transition_ms": 600,
        "autoplay_interval_ms": 5000,
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(value):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot interpret '{value}' as a boolean.")


def _merge(base, overrides):
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def get_supabase_secrets():
    """Reads the [supabase] block of .streamlit/secrets.toml, or {} outside the app."""
    try:
        secrets = dict(st.secrets["supabase"])
        logging.info("Successfully loaded Supabase credentials from st.secrets.")
        return secrets
    except Exception:
        logging.info("st.secrets not available. Falling back to environment variables.")
        return {}


def read_config(path=SETTINGS_FILE, environ=None, secrets=None):
    """
    Builds the app config: defaults, then settings.yaml, then Streamlit secrets, then env vars.
    :param path: Location of the YAML settings file. A missing file is not an error.
    :param environ: Mapping used for env overrides (defaults to os.environ).
    :param secrets: The [supabase] secrets block, if any.
    :return: The config dict, or {"error": "..."} if it cannot be used.
    """
    environ = os.environ if environ is None else environ
    config = copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, 'r') as f:
            settings = yaml.safe_load(f) or {}
        if not isinstance(settings, dict):
            return {"error": f"{path} must contain a mapping of settings."}
        _merge(config, settings)
    except FileNotFoundError:
        logging.warning(f"{path} not found. Using defaults and environment variables.")
    except yaml.YAMLError as e:
        logging.error(f"Failed to parse {path}: {e}")
        return {"error": f"{path} is not valid YAML."}

    _merge(config["supabase"], {k: v for k, v in (secrets or {}).items() if v})

    env_overrides = {
        ("supabase", "base_url"): "SUPABASE_URL",
        ("supabase", "api_key"): "SUPABASE_KEY",
        ("storefront", "maintenance_mode"): "STOREFRONT_MAINTENANCE_MODE",
    }
    for (section, key), env_var in env_overrides.items():
        if env_var in environ:
            config[section][key] = environ[env_var]
            logging.info(f"Loaded {section}.{key} from environment variable {env_var}.")

    try:
        config["storefront"]["maintenance_mode"] = parse_bool(config["storefront"]["maintenance_mode"])
        config["storefront"]["reviews_limit"] = int(config["storefront"]["reviews_limit"])
        config["carousel"]["transition_ms"] = float(config["carousel"]["transition_ms"])
        config["carousel"]["autoplay_interval_ms"] = float(config["carousel"]["autoplay_interval_ms"])
    except (TypeError, ValueError) as e:
        logging.error(f"Invalid configuration value: {e}")
        return {"error": f"Invalid configuration value: {e}"}

    return config


def backend_config_error(config):
    """Returns a message if the Supabase settings are unusable, else None."""
    if "error" in config:
        return config["error"]
    supabase = config.get("supabase", {})
    if not supabase.get("base_url") or not supabase.get("api_key"):
        return "Supabase configuration is incomplete. Set SUPABASE_URL and SUPABASE_KEY or add them to secrets.toml."
    return None


@st.cache_data(show_spinner=False)
def load_app_config():
    """Loads config from YAML and merges secrets and environment overrides."""
    return read_config(SETTINGS_FILE, secrets=get_supabase_secrets())


APP_CONFIG = load_app_config()
