import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from a11y_audit.features.scan.services.rendering.snapshot import NODE_ATTR, Snapshot
from a11y_audit.platform.config import settings
from a11y_audit.platform.exceptions import BrowserLaunchError, RenderFailure, RenderTimeout

logger = logging.getLogger(__name__)

# Stamps every element and returns the serialized DOM plus the computed styles
# the checks read. Nothing else is executed in the page.
CAPTURE_SCRIPT = """
var nodes = document.querySelectorAll('*');
var styles = {};
for (var i = 0; i < nodes.length; i++) {
    var el = nodes[i];
    el.setAttribute('%(attr)s', String(i));
    var cs = window.getComputedStyle(el);
    styles[String(i)] = {
        'color': cs.color,
        'background-color': cs.backgroundColor,
        'font-size': cs.fontSize,
        'font-weight': cs.fontWeight,
        'display': cs.display,
        'visibility': cs.visibility
    };
}
return {
    html: document.documentElement ? document.documentElement.outerHTML : '',
    title: document.title || '',
    url: window.location.href,
    styles: styles
};
""" % {"attr": NODE_ATTR}

READY_STATE_SCRIPT = "return document.readyState"
RESOURCE_COUNT_SCRIPT = "return window.performance.getEntriesByType('resource').length"


class PageRenderer:
    """
    Loads a URL in a fresh headless Chrome and yields a Snapshot of it.

    Every call owns its own browser process, which is quit when the ``render``
    block exits, whatever the outcome.
    """

    @staticmethod
    def build_driver() -> webdriver.Chrome:
        chrome_options = Options()
        if settings.HEADLESS:
            chrome_options.add_argument('--headless')
        chrome_options.add_argument('--no-sandbox')
        chrome_options.add_argument('--disable-dev-shm-usage')
        chrome_options.add_argument('--disable-gpu')
        chrome_options.add_argument(f'--window-size={settings.WINDOW_WIDTH},{settings.WINDOW_HEIGHT}')

        if settings.CHROMEDRIVER_PATH:
            driver_service = Service(executable_path=settings.CHROMEDRIVER_PATH)
            return webdriver.Chrome(service=driver_service, options=chrome_options)
        if settings.USE_WEBDRIVER_MANAGER:
            driver_service = Service(ChromeDriverManager().install())
            return webdriver.Chrome(service=driver_service, options=chrome_options)
        return webdriver.Chrome(options=chrome_options)

    @contextmanager
    def render(self, url: str, timeout: Optional[float] = None) -> Iterator[Snapshot]:
        """
        Render ``url`` under a hard deadline.

        Raises:
            BrowserLaunchError: Chrome could not be started
            RenderTimeout: navigation or readiness wait exceeded the deadline
            RenderFailure: any other navigation error
        """
        timeout = timeout or settings.PAGE_TIMEOUT
        deadline = time.monotonic() + timeout
        driver = self._launch(url)
        try:
            snapshot = self._load(driver, url, deadline, timeout)
            yield snapshot
        finally:
            self._quit(driver, url)

    def _launch(self, url: str) -> webdriver.Chrome:
        try:
            return self.build_driver()
        except Exception as e:
            logger.error(f"Could not start browser for {url}: {e}")
            raise BrowserLaunchError(url, f"Browser launch failed: {e}") from e

    def _load(self, driver: webdriver.Chrome, url: str, deadline: float, timeout: float) -> Snapshot:
        try:
            driver.set_page_load_timeout(self._remaining(deadline, url, timeout))
            start_time = time.monotonic()
            driver.get(url)

            WebDriverWait(
                driver,
                self._remaining(deadline, url, timeout),
                poll_frequency=settings.NETWORK_IDLE_POLL,
            ).until(lambda d: d.execute_script(READY_STATE_SCRIPT) == "complete")
            self._wait_for_network_idle(driver, deadline)

            data = driver.execute_script(CAPTURE_SCRIPT)
            logger.info(f"Rendered {url} in {time.monotonic() - start_time:.2f}s")
        except TimeoutException as e:
            raise RenderTimeout(url, f"Page load timeout after {timeout} seconds") from e
        except WebDriverException as e:
            raise RenderFailure(url, f"WebDriver error: {e.msg or e}") from e

        if not isinstance(data, dict) or not data.get("html"):
            raise RenderFailure(url, "Page produced no DOM to inspect")

        return Snapshot(
            data["html"],
            data.get("url") or url,
            styles=data.get("styles") or {},
            title=data.get("title") or "",
        )

    @staticmethod
    def _wait_for_network_idle(driver: webdriver.Chrome, deadline: float) -> None:
        """
        Wait until no new resources are fetched between two polls.

        The document is already complete at this point, so running out of time
        here is not an error.
        """
        budget = min(settings.NETWORK_IDLE_TIMEOUT, deadline - time.monotonic())
        if budget <= 0:
            return

        last_count = {"value": -1}

        def network_quiet(d) -> bool:
            count = d.execute_script(RESOURCE_COUNT_SCRIPT)
            settled = count == last_count["value"]
            last_count["value"] = count
            return settled

        try:
            WebDriverWait(driver, budget, poll_frequency=settings.NETWORK_IDLE_POLL).until(network_quiet)
        except TimeoutException:
            logger.debug("Network still busy after readiness signal, capturing anyway")

    @staticmethod
    def _remaining(deadline: float, url: str, timeout: float) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise RenderTimeout(url, f"Page load timeout after {timeout} seconds")
        return remaining

    @staticmethod
    def _quit(driver: webdriver.Chrome, url: str) -> None:
        try:
            driver.quit()
        except WebDriverException as e:
            logger.warning(f"Error closing browser for {url}: {e}")
