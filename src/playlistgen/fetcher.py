"""Cursor-paginated list retrieval."""

from typing import Any, Callable, Dict, List, Optional

from . import config
from .cancellation import CancellationToken
from .logging_config import get_logger

logger = get_logger(__name__)

# (page_token, page_size) -> executable API request
RequestFactory = Callable[[Optional[str], int], Any]


def fetch_collection(
    client,
    request_factory: RequestFactory,
    cancel_token: CancellationToken,
    max_results: Optional[int] = None,
    page_size: int = config.PAGE_SIZE,
) -> List[Dict]:
    """Collect items from a paginated list endpoint.

    Follows ``nextPageToken`` until it is absent or ``max_results`` items
    have been gathered; a capped result is truncated to exactly the cap.

    Args:
        client: Object whose ``execute(request, cancel_token)`` runs one request
        request_factory: Builds the request for a page
        cancel_token: Cancellation signal of the current run
        max_results: Optional cap on the number of items returned
        page_size: Number of items requested per page

    Returns:
        List of raw item dictionaries, in the order the API returned them

    Raises:
        OperationCancelled: If the run is cancelled before or during a page
        YouTubeError: If any page request fails
    """
    items: List[Dict] = []
    page_token = None
    pages = 0

    while True:
        cancel_token.raise_if_cancelled()

        response = client.execute(request_factory(page_token, page_size), cancel_token)
        pages += 1

        page_items = response.get("items", [])
        items.extend(page_items)

        if max_results is not None and len(items) >= max_results:
            items = items[:max_results]
            break

        page_token = response.get("nextPageToken")
        if not page_token or not page_items:
            break

    logger.debug("Fetched %d items in %d pages", len(items), pages)
    return items
