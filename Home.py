# storefront/Home.py
import streamlit as st

from utils.config_loader import APP_CONFIG
from utils.data_loader import load_catalog
from views import sections
from views.hero import render_hero, teardown_slideshow

st.set_page_config(
    page_title="Prasanthi Crafts",
    page_icon="🏺",
    layout="wide"
)

if "error" in APP_CONFIG:
    st.error(f"Configuration Error: {APP_CONFIG['error']}")
    st.stop()

storefront_config = APP_CONFIG["storefront"]
brand_name = storefront_config["brand_name"]

# --- MAINTENANCE GATE ---
# Checked before any backend call; toggled from settings.yaml or STOREFRONT_MAINTENANCE_MODE
if storefront_config["maintenance_mode"]:
    teardown_slideshow()
    sections.render_maintenance_page(brand_name)
    st.stop()

# --- LOAD DATA ---
snapshot = load_catalog()

# --- NAVBAR ---
sections.render_navbar(brand_name, snapshot.categories)

# --- HERO SLIDESHOW ---
render_hero()

# --- CATALOG ---
sections.render_categories(snapshot.categories)
sections.render_products(snapshot.products)
sections.render_reviews(snapshot.reviews)

# --- CART & FOOTER ---
sections.render_cart_sidebar()
sections.render_footer(brand_name)
