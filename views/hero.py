# storefront/views/hero.py
import html
import time

import streamlit as st

from services.scheduling import VirtualClock
from services.slideshow import DEFAULT_SLIDES, SlideRotationController, SlideStyle
from utils.config_loader import APP_CONFIG

# Fragment rerun period. Short enough that a 600ms transition settles before the next click.
TICK_SECONDS = 0.5

SLIDE_STYLES = {
    SlideStyle.DARK: {"background": "linear-gradient(135deg, #111827, #1f2937)", "accent": "#facc15",
                      "button_bg": "#facc15", "button_fg": "#000000"},
    SlideStyle.GOLD: {"background": "linear-gradient(135deg, #ca8a04, #eab308)", "accent": "#000000",
                      "button_bg": "#000000", "button_fg": "#ffffff"},
    SlideStyle.NOIR: {"background": "linear-gradient(135deg, #000000, #111827)", "accent": "#fde047",
                      "button_bg": "#facc15", "button_fg": "#000000"},
}


def get_slideshow():
    """Returns this session's slideshow controller, creating and starting it on first use."""
    if "slideshow" not in st.session_state:
        carousel_config = APP_CONFIG.get("carousel", {})
        clock = VirtualClock()
        controller = SlideRotationController(
            DEFAULT_SLIDES,
            clock,
            transition_duration=carousel_config.get("transition_ms", 600),
            autoplay_interval=carousel_config.get("autoplay_interval_ms", 5000),
        )
        controller.start()
        st.session_state.slideshow = controller
        st.session_state.slideshow_clock = clock
        st.session_state.slideshow_last_tick = time.monotonic()
    return st.session_state.slideshow


def teardown_slideshow():
    controller = st.session_state.pop("slideshow", None)
    if controller is not None:
        controller.stop()
    st.session_state.pop("slideshow_clock", None)
    st.session_state.pop("slideshow_last_tick", None)


def _advance_clock():
    # Feed the wall-clock time since the previous run into the virtual clock.
    # A long gap (e.g. a background tab) counts as one autoplay step at most.
    now = time.monotonic()
    elapsed_ms = (now - st.session_state.slideshow_last_tick) * 1000
    st.session_state.slideshow_last_tick = now
    limit = st.session_state.slideshow.autoplay_interval
    st.session_state.slideshow_clock.advance(min(max(elapsed_ms, 0), limit))


def _slide_html(slide, brand_name):
    style = SLIDE_STYLES[slide.style_variant]
    markup = f"""
    <div style="background:{style['background']};border-radius:1.5rem;padding:5rem 2rem;text-align:center;min-height:22rem;">
        <p style="color:{style['accent']};letter-spacing:0.3em;text-transform:uppercase;font-size:0.8rem;font-weight:600;">
            {html.escape(brand_name)}
        </p>
        <h1 style="color:#ffffff;font-size:3.5rem;font-weight:800;margin:0.5rem 0 1.5rem;">{html.escape(slide.title)}</h1>
        <p style="color:rgba(255,255,255,0.7);font-size:1.15rem;max-width:40rem;margin:0 auto 2.5rem;">
            {html.escape(slide.subtitle)}
        </p>
        <a href="#products" style="background:{style['button_bg']};color:{style['button_fg']};padding:1rem 2rem;
           border-radius:9999px;font-weight:600;font-size:0.85rem;text-transform:uppercase;text-decoration:none;">
            {html.escape(slide.cta_label)}
        </a>
    </div>
    """
    # Indented lines would otherwise render as a markdown code block
    return "".join(line.strip() for line in markup.splitlines())


@st.fragment(run_every=TICK_SECONDS)
def render_hero():
    controller = get_slideshow()
    _advance_clock()

    brand_name = APP_CONFIG.get("storefront", {}).get("brand_name", "")
    st.markdown(_slide_html(controller.current_slide, brand_name), unsafe_allow_html=True)

    cols = st.columns([1] + [1] * controller.slide_count + [1])
    cols[0].button("‹", key="hero_prev", on_click=controller.prev, width="stretch")
    for index in range(controller.slide_count):
        marker = "●" if index == controller.current_index else "○"
        cols[index + 1].button(marker, key=f"hero_dot_{index}", on_click=controller.go_to, args=(index,),
                               width="stretch")
    cols[-1].button("›", key="hero_next", on_click=controller.next, width="stretch")
