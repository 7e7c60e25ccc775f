"""Screenshot utilities for the browser agent."""

import base64
from pathlib import Path

import nodriver.cdp.page as page_cdp


class ScreenshotError(Exception):
    """Both the CDP capture and nodriver's own screenshot failed."""


async def take_screenshot(page, filepath: str | Path, full_page: bool = False) -> str:
    """Take a screenshot of the current page.

    Args:
        page: nodriver page/tab object
        filepath: Where to save the screenshot
        full_page: Whether to capture the full scrollable page

    Returns:
        Path to the saved screenshot
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    try:
        if full_page:
            screenshot_data = await page.send(
                page_cdp.capture_screenshot(
                    format_="png",
                    capture_beyond_viewport=True,
                )
            )
        else:
            screenshot_data = await page.send(page_cdp.capture_screenshot(format_="png"))

        # nodriver returns the base64 string directly for this command
        encoded = getattr(screenshot_data, "data", screenshot_data)
        with open(filepath, "wb") as f:
            f.write(base64.b64decode(encoded))

        return str(filepath)

    except Exception as e:
        # Fallback to nodriver's built-in method
        try:
            await page.save_screenshot(str(filepath), full_page=full_page)
            return str(filepath)
        except Exception as e2:
            raise ScreenshotError(
                f"Failed to take screenshot: {e}, fallback also failed: {e2}"
            ) from e2
