"""
Key API

Provides the CRUD interface of the key-value store.
"""

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from kvdb.api.deps import KVStoreServiceDep
from kvdb.common.errors import AppError
from kvdb.domain.kv_store import (
    KeyCreate,
    KeyCreateResponse,
    KeyDeleteResponse,
    KeyGetResponse,
    KeyUpdate,
    KeyUpdateResponse,
)

router = APIRouter(prefix="/key", tags=["kvdb"])


@router.post("", response_model=KeyCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_key(
    data: KeyCreate,
    service: KVStoreServiceDep,
):
    """
    Create a key

    A random name is generated when `name` is omitted. Keys created with
    `read_only` can be read and deleted but never updated.
    """
    try:
        record = await service.create(data.name, data.value, data.read_only)
        return KeyCreateResponse(**record.model_dump())
    except AppError as e:
        return JSONResponse(content=e.to_dict(), status_code=e.status_code)


@router.get("", response_model=KeyGetResponse)
async def get_key(
    service: KVStoreServiceDep,
    name: str = Query(..., description="Key Name"),
):
    """
    Get the value of a key

    Reading a key counts as activity and postpones its expiration.
    """
    try:
        value = await service.read(name)
        return KeyGetResponse(value=value)
    except AppError as e:
        return JSONResponse(content=e.to_dict(), status_code=e.status_code)


@router.patch("", response_model=KeyUpdateResponse)
async def update_key(
    data: KeyUpdate,
    service: KVStoreServiceDep,
):
    """
    Update the value of a key
    """
    try:
        await service.update(data.name, data.value)
        return KeyUpdateResponse()
    except AppError as e:
        return JSONResponse(content=e.to_dict(), status_code=e.status_code)


@router.delete("", response_model=KeyDeleteResponse)
async def delete_key(
    service: KVStoreServiceDep,
    name: str = Query(..., description="Key Name"),
):
    """
    Delete a key

    Read-only keys can be deleted.
    """
    try:
        await service.delete(name)
        return KeyDeleteResponse()
    except AppError as e:
        return JSONResponse(content=e.to_dict(), status_code=e.status_code)
