# sweetshop/routers/sweets.py
import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from sqlmodel import Session

from sweetshop.core.auth import require_admin, require_auth
from sweetshop.database import get_session
from sweetshop.repositories.sweet_repo import SweetRepository
from sweetshop.schemas.sweet import (
    RestockRequest,
    SweetCreate,
    SweetFilter,
    SweetRead,
    SweetUpdate,
)
from sweetshop.services.sweet_service import SweetService

router = APIRouter(
    prefix="/sweets",
    tags=["Sweets"],
    dependencies=[Depends(require_auth)],
)

repo = SweetRepository()
service = SweetService(repo)


# -------- Any authenticated user --------


@router.get("", response_model=list[SweetRead])
def list_sweets(session: Session = Depends(get_session)):
    """
    List all sweets.
    """
    return service.list_sweets(session)


@router.get("/search", response_model=list[SweetRead])
def search_sweets(
    session: Session = Depends(get_session),
    name: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
):
    """
    Search sweets.

    - name: case-insensitive substring
    - category: exact match
    - minPrice / maxPrice: inclusive bounds
    All criteria are optional and combined with AND.
    """
    filters = SweetFilter(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
    )
    return service.search_sweets(session, filters)


@router.get("/categories", response_model=list[str])
def list_categories(session: Session = Depends(get_session)):
    """
    Distinct non-empty category labels of the current sweets.
    """
    return service.list_categories(session)


@router.get("/{sweet_id}", response_model=SweetRead)
def get_sweet(
    sweet_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single sweet by id.
    """
    return service.get_sweet(session, sweet_id)


@router.post("/{sweet_id}/purchase", response_model=SweetRead)
def purchase_sweet(
    sweet_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Buy one unit.

    - 400 if the sweet is out of stock (quantity unchanged).
    """
    return service.purchase(session, sweet_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=SweetRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_sweet(
    payload: SweetCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new sweet (admin only).
    """
    return service.create_sweet(session, payload)


@router.put(
    "/{sweet_id}",
    response_model=SweetRead,
    dependencies=[Depends(require_admin)],
)
def update_sweet(
    sweet_id: uuid.UUID,
    payload: SweetUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing sweet (admin only). Absent fields are unchanged.
    """
    return service.update_sweet(session, sweet_id, payload)


@router.delete(
    "/{sweet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_sweet(
    sweet_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a sweet (admin only).
    """
    service.delete_sweet(session, sweet_id)
    return None


@router.post(
    "/{sweet_id}/restock",
    response_model=SweetRead,
    dependencies=[Depends(require_admin)],
)
def restock_sweet(
    sweet_id: uuid.UUID,
    payload: RestockRequest | None = Body(default=None),
    session: Session = Depends(get_session),
):
    """
    Add units to stock (admin only).

    - Body {"amount": n} is optional; defaults to 1.
    - amount must be a positive integer.
    """
    amount = payload.amount if payload is not None else 1
    return service.restock(session, sweet_id, amount)
