# storefront/services/slideshow.py
import enum
import logging
import threading
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

TRANSITION_DURATION_MS = 600
AUTOPLAY_INTERVAL_MS = 5000


class SlideStyle(enum.Enum):
    DARK = "dark"
    GOLD = "gold"
    NOIR = "noir"


@dataclass(frozen=True)
class Slide:
    id: int
    title: str
    subtitle: str
    cta_label: str
    style_variant: SlideStyle


DEFAULT_SLIDES = (
    Slide(
        id=1,
        title="Handcrafted with Love",
        subtitle="Discover unique artisan pieces that bring warmth and character to every corner of your home.",
        cta_label="Shop Collection",
        style_variant=SlideStyle.DARK,
    ),
    Slide(
        id=2,
        title="New Arrivals",
        subtitle="Explore our latest collection of premium handmade crafts, designed to inspire and delight.",
        cta_label="View New Items",
        style_variant=SlideStyle.GOLD,
    ),
    Slide(
        id=3,
        title="Premium Quality",
        subtitle="Each piece is carefully crafted by skilled artisans using traditional techniques and quality materials.",
        cta_label="Learn More",
        style_variant=SlideStyle.NOIR,
    ),
)


@dataclass(frozen=True)
class CarouselState:
    current_index: int = 0
    transitioning: bool = False


class SlideRotationController:
    """
    Drives a fixed-size carousel: autoplay on a recurring timer, manual
    next/prev/jump, and at most one transition in flight at a time.

    Requests that arrive while a transition is running are dropped, not queued.
    Manual navigation shares the same guard as autoplay and does not reset the
    autoplay timer.
    """

    def __init__(self, slides: Sequence[Slide], scheduler,
                 transition_duration: float = TRANSITION_DURATION_MS,
                 autoplay_interval: float = AUTOPLAY_INTERVAL_MS):
        if len(slides) <= 0:
            raise ValueError("A slideshow needs at least one slide.")
        self.slides = tuple(slides)
        self.scheduler = scheduler
        self.transition_duration = transition_duration
        self.autoplay_interval = autoplay_interval
        self._current_index = 0
        self._transitioning = False
        self._autoplay_timer = None
        self._completion_timer = None
        self._stopped = False
        # Streamlit runs each session's script on a worker thread
        self._lock = threading.RLock()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    @property
    def state(self) -> CarouselState:
        with self._lock:
            return CarouselState(self._current_index, self._transitioning)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def transitioning(self) -> bool:
        return self._transitioning

    @property
    def current_slide(self) -> Slide:
        return self.slides[self._current_index]

    @property
    def running(self) -> bool:
        return self._autoplay_timer is not None

    def go_to(self, index: int) -> bool:
        """
        Starts a transition to the given slide.
        :param index: Target slide; wrapped modulo the slide count.
        :return: True if a transition started, False if the request was dropped.
        """
        with self._lock:
            if self._stopped:
                return False
            target = index % self.slide_count
            if self._transitioning or target == self._current_index:
                return False
            self._transitioning = True
            self._current_index = target
            self._completion_timer = self.scheduler.call_later(
                self.transition_duration, self._finish_transition
            )
            logger.debug(f"Slideshow moved to slide {target}.")
            return True

    def next(self) -> bool:
        return self.go_to((self._current_index + 1) % self.slide_count)

    def prev(self) -> bool:
        return self.go_to((self._current_index - 1 + self.slide_count) % self.slide_count)

    def _finish_transition(self):
        with self._lock:
            self._transitioning = False
            self._completion_timer = None

    def start(self):
        with self._lock:
            if self._autoplay_timer is not None:
                return
            if self._stopped:
                # A transition cut short by stop() never completed
                self._transitioning = False
                self._stopped = False
            self._autoplay_timer = self.scheduler.call_every(self.autoplay_interval, self.next)

    def stop(self):
        """Cancels autoplay and any pending transition completion. Nothing mutates state afterwards."""
        with self._lock:
            self._stopped = True
            for timer in (self._autoplay_timer, self._completion_timer):
                if timer is not None:
                    timer.cancel()
            self._autoplay_timer = None
            self._completion_timer = None
