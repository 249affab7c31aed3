"""
Drop resources that are still attached to at least one note.

Reference: https://joplinapp.org/api/references/rest_api/#get-resources-id-notes
"""

from typing import List

from joplin_utils.error_utils import create_service_error
from joplin_utils.joplin_client import JoplinClient, resource_path
from joplin_utils.logging_utils import get_logger
from joplin_utils.models import ResourceSet

logger = get_logger(__name__)


def filter_referenced_resources(client: JoplinClient, resources: ResourceSet) -> List[str]:
    """Remove every resource referenced by a note from ``resources`` in place.

    All lookups run before the set is touched: if any lookup fails the error
    propagates and ``resources`` is left exactly as it was passed in.

    Returns:
        IDs of the referenced resources that were removed

    Raises:
        TransportError: a lookup could not be completed
        ServiceError: the service reported an error for a lookup
    """
    referenced = []
    params = {"fields": "id"}

    for resource_id in list(resources):
        path = resource_path(resource_id, "notes")
        envelope = client.request("GET", path, params)
        if envelope.error:
            logger.error(f"Note lookup for resource {resource_id} failed: {envelope.error}")
            raise create_service_error(client.describe(path, params), envelope.error)

        if envelope.items:
            logger.debug(f"Resource {resource_id} is used by {len(envelope.items)} note(s)")
            referenced.append(resource_id)

    for resource_id in referenced:
        del resources[resource_id]

    logger.info(f"{len(referenced)} resource(s) referenced by notes, {len(resources)} unused")
    return referenced
