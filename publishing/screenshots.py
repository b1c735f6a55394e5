"""Capture social and cover images from the site's preview templates."""

# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
# pyright: reportUnknownArgumentType=false

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol
from urllib.parse import quote

try:
    from playwright.async_api import (  # type: ignore[import-not-found]
        async_playwright,
    )
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'playwright'. Install with pip install"
        " playwright && playwright install chromium"
    ) from exc

LOGGER = logging.getLogger(__name__)

SOCIAL_ROUTE = "/generate/social"
BOOK_ROUTE = "/generate/book"

# Characters encodeURIComponent leaves untouched besides alphanumerics.
URI_COMPONENT_SAFE = "-_.!~*'()"

BROWSER_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


@dataclass(frozen=True, slots=True)
class Viewport:
    width: int
    height: int
    device_scale_factor: float = 1.0

    @property
    def pixel_size(self) -> tuple[int, int]:
        """Size of the captured PNG in device pixels."""

        return (
            round(self.width * self.device_scale_factor),
            round(self.height * self.device_scale_factor),
        )


SOCIAL_VIEWPORT = Viewport(1200, 630)
SQUARE_VIEWPORT = Viewport(1200, 1200)
COVER_VIEWPORT = Viewport(1000, 1600, 2.5)


def encode_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)


def build_template_url(
    base_url: str,
    route: str,
    *,
    title: str,
    description: str = "",
    image: str = "",
) -> str:
    """Return ``base_url + route`` with the item fields as query parameters."""

    query = "&".join(
        f"{key}={encode_component(value)}"
        for key, value in (
            ("title", title),
            ("description", description),
            ("image", image),
        )
    )
    return f"{base_url.rstrip('/')}{route}?{query}"


class ScreenshotCapturer(Protocol):
    """Anything that can save a PNG of ``url`` rendered at ``viewport``."""

    async def capture(
        self, url: str, destination: Path, viewport: Viewport
    ) -> Path:
        ...


class PlaywrightCapturer:
    """Headless Chromium shared across every capture of a run.

    Use as ``async with PlaywrightCapturer() as capturer``; each capture
    opens and closes its own page on the one browser.
    """

    def __init__(
        self,
        *,
        wait_until: str = "load",
        timeout_ms: int = 60_000,
    ) -> None:
        self.wait_until = wait_until
        self.timeout_ms = timeout_ms
        self._playwright: Any = None
        self._browser: Any = None

    async def __aenter__(self) -> "PlaywrightCapturer":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=True, args=list(BROWSER_ARGS)
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        LOGGER.debug("Launched Chromium for screenshot capture")
        return self

    async def __aexit__(self, *exc_info: Any) -> Optional[bool]:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        return None

    async def capture(
        self, url: str, destination: Path, viewport: Viewport
    ) -> Path:
        if self._browser is None:
            raise RuntimeError(
                "PlaywrightCapturer must be entered with 'async with' first"
            )

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        page: Any = await self._browser.new_page(
            viewport={"width": viewport.width, "height": viewport.height},
            device_scale_factor=viewport.device_scale_factor,
        )
        try:
            LOGGER.debug("Navigating to %s", url)
            await page.goto(
                url, wait_until=self.wait_until, timeout=self.timeout_ms
            )
            await page.screenshot(path=str(destination))
        finally:
            await page.close()
        LOGGER.info("Captured %s", destination)
        return destination


__all__ = [
    "BOOK_ROUTE",
    "COVER_VIEWPORT",
    "PlaywrightCapturer",
    "SOCIAL_ROUTE",
    "SOCIAL_VIEWPORT",
    "SQUARE_VIEWPORT",
    "ScreenshotCapturer",
    "Viewport",
    "build_template_url",
    "encode_component",
]
