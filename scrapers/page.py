"""
Rendered Page Module
====================
The narrow surface the crawler needs from a browser session, and its
Selenium implementation.

Scrapers only talk to RenderedPage, so tests can drive them with an
in-memory page instead of a live browser.
"""

from typing import Any, List, Optional, Protocol

from selenium import webdriver
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from config import Config
from utils import logger


class PageError(Exception):
    """A call into the rendering session failed."""


class ElementNotFound(PageError):
    """No element matched the selector."""


class SessionStartError(Exception):
    """A browser session could not be created."""


class RenderedPage(Protocol):
    def navigate(self, url: str) -> None: ...

    def find_all(self, selector: str, within: Any = None) -> List[Any]: ...

    def find_one(self, selector: str, within: Any = None) -> Any: ...

    def text(self, element: Any) -> str: ...

    def attribute(self, element: Any, name: str) -> str: ...

    def run_script(self, script: str, *args) -> Any: ...

    def click(self, element: Any) -> None: ...

    def close(self) -> None: ...


class SeleniumPage:
    """RenderedPage backed by a Selenium WebDriver."""

    def __init__(self, driver: WebDriver):
        self.driver = driver

    def navigate(self, url: str) -> None:
        try:
            self.driver.get(url)
        except WebDriverException as e:
            raise PageError(f"Failed to load {url}: {e.msg}") from e

    def find_all(self, selector: str, within: Optional[WebElement] = None) -> List[WebElement]:
        root = within if within is not None else self.driver
        try:
            return root.find_elements(By.CSS_SELECTOR, selector)
        except WebDriverException as e:
            raise PageError(f"Lookup failed for '{selector}': {e.msg}") from e

    def find_one(self, selector: str, within: Optional[WebElement] = None) -> WebElement:
        root = within if within is not None else self.driver
        try:
            return root.find_element(By.CSS_SELECTOR, selector)
        except NoSuchElementException as e:
            raise ElementNotFound(selector) from e
        except WebDriverException as e:
            raise PageError(f"Lookup failed for '{selector}': {e.msg}") from e

    def text(self, element: WebElement) -> str:
        try:
            return element.text
        except WebDriverException as e:
            raise PageError(f"Failed to read text: {e.msg}") from e

    def attribute(self, element: WebElement, name: str) -> str:
        try:
            return element.get_dom_attribute(name) or ''
        except WebDriverException as e:
            raise PageError(f"Failed to read attribute '{name}': {e.msg}") from e

    def run_script(self, script: str, *args) -> Any:
        try:
            return self.driver.execute_script(script, *args)
        except WebDriverException as e:
            raise PageError(f"Script execution failed: {e.msg}") from e

    def click(self, element: WebElement) -> None:
        try:
            element.click()
        except WebDriverException as e:
            raise PageError(f"Click failed: {e.msg}") from e

    def close(self) -> None:
        try:
            self.driver.quit()
        except WebDriverException as e:
            logger.warning(f"Failed to quit browser session: {e.msg}")


def create_browser_session() -> SeleniumPage:
    """
    Start one Chrome session from config.
    Uses the remote Selenium server when SELENIUM_REMOTE_URL is set,
    a local chromedriver otherwise.
    """
    options = Options()
    for arg in Config.get_browser_args():
        options.add_argument(arg)

    try:
        if Config.SELENIUM_REMOTE_URL:
            driver = webdriver.Remote(command_executor=Config.SELENIUM_REMOTE_URL, options=options)
        else:
            driver = webdriver.Chrome(options=options)
    except WebDriverException as e:
        raise SessionStartError(f"Error connecting to the WebDriver server: {e.msg}") from e

    logger.debug(f"Browser session started: {driver.session_id}")
    return SeleniumPage(driver)
