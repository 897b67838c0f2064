"""
API Routes
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from resource_versions.api.dependencies import get_store
from resource_versions.services.count_service import count_versions
from resource_versions.services.storage_service import ObjectStore
from resource_versions.utils.validation import validate_resource_name

router = APIRouter()


@router.get("/resource_version_amount/{resource_name}", response_class=PlainTextResponse)
async def resource_version_amount(resource_name: str, store: ObjectStore = Depends(get_store)):
    """Number of stored versions of a resource, as a plain decimal."""
    validate_resource_name(resource_name)
    # boto3 is blocking
    amount = await run_in_threadpool(count_versions, store, resource_name)
    return PlainTextResponse(str(amount))


@router.get("/health")
async def health():
    return {"status": "ok"}
