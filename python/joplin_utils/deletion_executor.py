"""
Best-effort deletion of unused resources.

Each resource is deleted independently: a failed delete (service error or
transport error) is recorded in the run summary and the loop moves on.
"""

from typing import Optional

from joplin_utils.error_utils import ActionableError
from joplin_utils.joplin_client import JoplinClient, resource_path
from joplin_utils.logging_utils import get_logger
from joplin_utils.models import ResourceSet, RunSummary

logger = get_logger(__name__)


def delete_resources(
    client: JoplinClient, resources: ResourceSet, summary: Optional[RunSummary] = None
) -> RunSummary:
    """Delete every resource in ``resources``, consuming the set as it goes.

    Args:
        client: Service client
        resources: Unused resources (ID -> size); entries are removed once processed
        summary: Running summary to extend (a new one is created if omitted)

    Returns:
        Summary with deleted count, reclaimed bytes and failed IDs
    """
    if summary is None:
        summary = RunSummary()

    for resource_id in list(resources):
        size = resources.pop(resource_id)
        try:
            envelope = client.request("DELETE", resource_path(resource_id))
        except ActionableError as e:
            logger.error(f"delete {resource_id} error: {e.message}")
            summary.record_failure(resource_id)
            continue

        if envelope.error:
            logger.error(f"delete {resource_id} error: {envelope.error}")
            summary.record_failure(resource_id)
            continue

        logger.debug(f"Deleted resource {resource_id}")
        summary.record_success(resource_id, size)

    logger.info(f"Deleted {summary.deleted_count} resource(s), {len(summary.failures)} failure(s)")
    return summary
