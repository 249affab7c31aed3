"""
Paginated collection of every resource (attachment) stored by Joplin.

Reference: https://joplinapp.org/api/references/rest_api/#pagination
"""

from joplin_utils.error_utils import create_service_error
from joplin_utils.joplin_client import JoplinClient
from joplin_utils.logging_utils import get_logger
from joplin_utils.models import ResourceSet

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def collect_all_resources(client: JoplinClient, page_size: int = MAX_PAGE_SIZE) -> ResourceSet:
    """Fetch every resource ID (and size) by walking the listing page by page.

    Pages are requested in ascending ID order starting at page 1 until the
    service reports ``has_more == False``.

    Raises:
        TransportError: a page could not be fetched or decoded
        ServiceError: the service reported an error for a page
    """
    resources: ResourceSet = {}
    page = 1
    has_more = True

    while has_more:
        params = {
            "fields": "id,size",
            "order_by": "id",
            "limit": page_size,
            "page": page,
        }
        envelope = client.request("GET", "/resources", params)
        if envelope.error:
            logger.error(f"Listing page {page} failed: {envelope.error}")
            raise create_service_error(client.describe("/resources", params), envelope.error)

        for item in envelope.items:
            resources[item.id] = item.size

        logger.debug(f"Page {page}: {len(envelope.items)} resources (has_more={envelope.has_more})")
        has_more = envelope.has_more
        page += 1

    logger.info(f"Collected {len(resources)} resources from {page - 1} page(s)")
    return resources
