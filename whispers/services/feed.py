"""
Feed Service - Whisper Fetching and Viewer Refresh

This module is the viewer's data-fetch layer. It loads the whisper list from
the posts API over HTTP and hands fresh snapshots to a WhisperViewer:

1. fetch_whispers: GET /api/posts and parse the entries
2. refresh_viewer: the refresh signal sent after a compose action

A failed fetch keeps the viewer on its current snapshot rather than emptying
it.
"""

import asyncio
import logging

import requests
from pydantic import ValidationError

from whispers.schemas import Whisper

logger = logging.getLogger(__name__)

# Seconds before a listing request is abandoned
FETCH_TIMEOUT = 10


async def fetch_whispers(base_url: str, author: str | None = None) -> list[Whisper] | None:
    """
    Fetch published whispers from the posts API.

    Args:
        base_url: Root URL of the Whispers service (e.g. "https://example.com")
        author: Optional nickname to fetch a single profile feed

    Returns:
        Parsed whispers in API order (newest first). An empty list when the
        API answers with something other than a list, None when the request
        failed and the current whispers should be kept.
    """
    url = f"{base_url.rstrip('/')}/api/posts"
    params = {"author": author} if author else None

    def _fetch_sync():
        try:
            response = requests.get(url, params=params, timeout=FETCH_TIMEOUT)
        except requests.RequestException as e:
            logger.error(f"Failed to fetch posts from {url}: {e}")
            return None

        if not response.ok:
            logger.error(f"Failed to fetch posts from {url}: HTTP {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Posts response from {url} is not JSON: {e}")
            return None

    # Run blocking request in a separate thread to avoid blocking the event loop
    payload = await asyncio.to_thread(_fetch_sync)
    if payload is None:
        return None
    if not isinstance(payload, list):
        return []

    whispers = []
    for entry in payload:
        try:
            whispers.append(Whisper.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed whisper entry: {e}")
    return whispers


async def refresh_viewer(viewer, base_url: str, author: str | None = None) -> bool:
    """
    Re-supply a viewer with the latest whispers.

    Called after a compose action completes. If the whisper currently open
    is gone from the new list, the viewer closes itself.

    Returns:
        True if the viewer got a new snapshot
    """
    whispers = await fetch_whispers(base_url, author=author)
    if whispers is None:
        return False
    viewer.replace_store(whispers)
    return True
