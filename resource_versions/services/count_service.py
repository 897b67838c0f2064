import logging

from resource_versions.errors import CountError, StoreError
from resource_versions.services.storage_service import ObjectStore

logger = logging.getLogger(__name__)


def resource_prefix(resource_name: str) -> str:
    return f"{resource_name}/"


def count_versions(store: ObjectStore, resource_name: str) -> int:
    """
    Count the version objects stored under ``{resource_name}/``.

    ``resource_name`` must already have passed validation. Every listing page
    is consumed; a missing ``Contents`` key means an empty page.
    """
    prefix = resource_prefix(resource_name)
    total = 0
    pages = 0
    try:
        for page in store.iter_pages(prefix):
            pages += 1
            total += len(page.get("Contents", []))
    except StoreError as e:
        raise CountError(resource_name, e) from e

    logger.debug(f"Counted {total} versions of '{resource_name}' across {pages} page(s)")
    return total
