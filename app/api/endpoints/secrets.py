from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_current_owner_id, get_lifecycle
from app.core.config import settings
from app.schemas.secret import (
    SecretCreate,
    SecretDisclosure,
    SecretMeta,
    SecretOut,
    SecretPage,
    SecretStats,
    SecretStatusFilter,
    SecretUpdate,
    SecretView,
    SortBy,
    SortOrder,
)
from app.services.lifecycle import SecretLifecycle

router = APIRouter()


# Secret pages and payloads must never end up in a browser or proxy cache
def set_no_cache_headers(response: Response):
    if response:
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"


@router.post("/secrets", response_model=SecretOut, status_code=status.HTTP_201_CREATED)
def create_secret(
    secret_data: SecretCreate,
    response: Response,
    owner_id: str = Depends(get_current_owner_id),
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    set_no_cache_headers(response)
    return lifecycle.create(
        owner_id,
        secret_data.content,
        password=secret_data.password,
        one_time_access=secret_data.one_time_access,
        expires_at=secret_data.expires_at,
    )


@router.get("/secrets", response_model=SecretPage)
def list_secrets(
    search: Optional[str] = None,
    status_filter: Optional[SecretStatusFilter] = Query(None, alias="status"),
    sort_by: SortBy = SortBy.created_at,
    sort_order: SortOrder = SortOrder.desc,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    owner_id: str = Depends(get_current_owner_id),
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    return lifecycle.list(
        owner_id,
        search=search or None,
        status=status_filter.value if status_filter else None,
        sort_by=sort_by.value,
        sort_order=sort_order.value,
        limit=limit,
        offset=offset,
    )


@router.get("/secrets/stats", response_model=SecretStats)
def get_stats(
    owner_id: str = Depends(get_current_owner_id),
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    return lifecycle.stats(owner_id)


@router.patch("/secrets/{secret_id}", response_model=SecretOut)
def update_secret(
    secret_id: str,
    patch: SecretUpdate,
    owner_id: str = Depends(get_current_owner_id),
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    # only the keys the client actually sent take part in the update
    return lifecycle.update(owner_id, secret_id, patch.model_dump(exclude_unset=True))


@router.delete("/secrets/{secret_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_secret(
    secret_id: str,
    owner_id: str = Depends(get_current_owner_id),
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Response:
    lifecycle.delete(owner_id, secret_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/secret/{secret_id}", response_model=SecretMeta)
def get_secret_meta(
    secret_id: str,
    response: Response,
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    set_no_cache_headers(response)
    return lifecycle.get_meta(secret_id)


@router.post("/secret/{secret_id}/view", response_model=SecretDisclosure)
def view_secret(
    secret_id: str,
    response: Response,
    body: Optional[SecretView] = None,
    lifecycle: SecretLifecycle = Depends(get_lifecycle),
) -> Any:
    set_no_cache_headers(response)
    return lifecycle.disclose(secret_id, password=body.password if body else None)
