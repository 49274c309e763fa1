"""Browser opener for the hosting provider's pull request page."""

from __future__ import annotations

import webbrowser


def open_url(url: str) -> bool:
    """Open a URL in the user's default browser.

    Returns:
        True if a browser was launched
    """
    return webbrowser.open(url)
