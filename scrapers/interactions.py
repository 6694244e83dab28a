"""
Page Interaction Module
=======================
Primitives run on a rendered page before anything is read from it:
scrolling until lazy content stops growing, closing modals, and
expanding the image gallery.
"""

import time
from dataclasses import dataclass

from config import Config
from utils import logger
from .page import PageError, RenderedPage


SCROLL_BY_SCRIPT = "window.scrollBy(0, arguments[0]);"
SCROLL_METRICS_SCRIPT = (
    "var d = document.documentElement;"
    "return [d.scrollTop, d.clientHeight, d.scrollHeight];"
)
EXPAND_GALLERY_SCRIPT = (
    "var element = document.querySelector(arguments[0]);"
    "if (element) { element.classList.add(arguments[1]); }"
)


@dataclass
class ScrollResult:
    converged: bool
    scrolls: int
    error: str = ''


def scroll_to_bottom(
    page: RenderedPage,
    step: int = Config.SCROLL_STEP_PX,
    settle: float = Config.SCROLL_SETTLE_SECONDS,
    max_iterations: int = Config.SCROLL_MAX_ITERATIONS
) -> ScrollResult:
    """
    Scroll by a fixed step until scrollTop + clientHeight >= scrollHeight.

    Stops after max_iterations scrolls or on the first script failure and
    reports converged=False; callers go on with whatever has rendered.
    """
    scrolls = 0
    while scrolls < max_iterations:
        try:
            page.run_script(SCROLL_BY_SCRIPT, step)
            scrolls += 1
            time.sleep(settle)
            scroll_top, client_height, scroll_height = page.run_script(SCROLL_METRICS_SCRIPT)
        except (PageError, TypeError, ValueError) as e:
            logger.warning(f"Scroll aborted after {scrolls} steps: {e}")
            return ScrollResult(converged=False, scrolls=scrolls, error=str(e))

        if float(scroll_top) + float(client_height) >= float(scroll_height):
            return ScrollResult(converged=True, scrolls=scrolls)

    logger.warning(f"Scroll did not reach the bottom after {max_iterations} steps")
    return ScrollResult(converged=False, scrolls=scrolls, error='max iterations reached')


def close_modals(page: RenderedPage, selector: str) -> int:
    """Click every modal close button. Best effort; returns clicks that succeeded."""
    try:
        buttons = page.find_all(selector)
    except PageError as e:
        logger.debug(f"Failed to find modal close buttons: {e}")
        return 0

    closed = 0
    for button in buttons:
        try:
            page.click(button)
        except PageError:
            continue
        closed += 1
        logger.debug("Modal closed")
    return closed


def expand_gallery(page: RenderedPage, selector: str, css_class: str) -> bool:
    """Add the expand class to the image gallery so every image is rendered."""
    try:
        page.find_one(selector)
    except PageError:
        return False

    try:
        page.run_script(EXPAND_GALLERY_SCRIPT, selector, css_class)
    except PageError as e:
        logger.debug(f"Failed to add '{css_class}' to '{selector}': {e}")
        return False
    return True
