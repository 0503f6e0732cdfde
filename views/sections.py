# storefront/views/sections.py
import html

import streamlit as st

from services.cart import Cart

PRODUCT_COLUMNS = 4
CATEGORY_COLUMNS = 4


def get_cart() -> Cart:
    if "cart" not in st.session_state:
        st.session_state.cart = Cart()
    return st.session_state.cart


def render_maintenance_page(brand_name):
    st.title(f"🛠️ {brand_name}")
    st.header("We'll be back soon")
    st.write("Our store is undergoing scheduled maintenance. Please check back in a little while.")


def render_navbar(brand_name, categories):
    col1, col2 = st.columns([3, 2])
    with col1:
        st.markdown(f"## {html.escape(brand_name)}")
    with col2:
        links = ["[Home](#)", "[Products](#products)", "[Reviews](#reviews)"]
        st.markdown(" · ".join(links))
        if categories:
            with st.popover("Categories"):
                for category in categories:
                    st.markdown(f"[{category.name}](#category-{category.slug})")


def render_categories(categories):
    if not categories:
        return

    st.markdown("---")
    st.caption("BROWSE")
    st.header("Shop by Category", anchor="categories")
    for start in range(0, len(categories), CATEGORY_COLUMNS):
        cols = st.columns(CATEGORY_COLUMNS)
        for col, category in zip(cols, categories[start:start + CATEGORY_COLUMNS]):
            with col:
                if category.image_url:
                    st.image(category.image_url, width="stretch")
                st.subheader(category.name, anchor=f"category-{category.slug}")
                st.caption("Explore →")


def _add_to_cart(product):
    get_cart().add(product)
    st.toast(f"Added {product.name} to your cart", icon="🛒")


def render_products(products):
    st.markdown("---")
    st.header("Our Products", anchor="products")
    if not products:
        st.info("Products coming soon. Check back later!")
        return

    for start in range(0, len(products), PRODUCT_COLUMNS):
        cols = st.columns(PRODUCT_COLUMNS)
        for col, product in zip(cols, products[start:start + PRODUCT_COLUMNS]):
            with col.container(border=True):
                if product.image_url:
                    st.image(product.image_url, width="stretch")
                else:
                    st.markdown("🖼️ *No image*")
                badges = []
                if product.category_name:
                    badges.append(f":orange-background[{product.category_name}]")
                if not product.in_stock:
                    badges.append(":red-background[Out of Stock]")
                if badges:
                    st.markdown(" ".join(badges))
                st.markdown(f"**{product.name}**")
                if product.description:
                    st.caption(product.description)
                st.markdown(f"### \\${product.price:,.2f}")
                st.button("Add to cart", key=f"add_{product.id}", on_click=_add_to_cart, args=(product,),
                          disabled=not product.in_stock, width="stretch")


def render_reviews(reviews):
    if not reviews:
        return

    st.markdown("---")
    st.header("What Our Customers Say", anchor="reviews")
    cols = st.columns(3)
    for index, review in enumerate(reviews):
        with cols[index % 3].container(border=True):
            st.markdown("★" * review.rating + "☆" * max(5 - review.rating, 0))
            st.markdown(f"*“{review.comment}”*")
            st.markdown(f"**{review.initial}** · {review.user_name}")
            if review.product_name:
                st.caption(f"on {review.product_name}")


def render_cart_sidebar():
    cart = get_cart()
    with st.sidebar:
        st.header(f"🛒 Cart ({cart.item_count})")
        if not cart.lines:
            st.caption("Your cart is empty.")
            return
        for line in cart.lines:
            col1, col2 = st.columns([4, 1])
            col1.write(f"{line.quantity} × {line.name}: \\${line.subtotal:,.2f}")
            col2.button("✕", key=f"remove_{line.product_id}", on_click=cart.remove, args=(line.product_id,))
        st.markdown(f"**Total: \\${cart.total:,.2f}**")
        st.button("Clear cart", on_click=cart.clear)


def render_footer(brand_name):
    st.markdown("---")
    st.caption(f"© {html.escape(brand_name)}. Handmade with care.")
