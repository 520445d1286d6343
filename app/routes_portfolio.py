# routes_portfolio.py
"""
Routes for the asset ledger: CRUD on asset records plus the aggregates
the dashboard uses (available months/years, monthly performance).

Store errors (ValidationError / NotFoundError / StorageError) are turned
into JSON responses by the handlers registered in main.create_app.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.deps import get_store
from app.errors import ValidationError
from app.schemas import (
    AssetCreate,
    AssetOut,
    AssetUpdate,
    MessageOut,
    MonthlyTotals,
    MonthYear,
    RepairOut,
)
from app.services.ledger_store import LedgerStore

router = APIRouter(prefix="/portfolio", tags=["Portfolio"])


# -------------------------------------------------------------------
# Create / list
# -------------------------------------------------------------------

@router.post("", status_code=status.HTTP_201_CREATED, response_model=AssetOut)
def create_asset(payload: AssetCreate, store: LedgerStore = Depends(get_store)):
    """
    Add an asset value for a month/year (defaults to the current month).
    """
    if not (payload.asset_name or "").strip() or payload.asset_value is None:
        raise ValidationError("Asset name and value are required.")

    record = store.create(
        payload.asset_name,
        payload.asset_value,
        month=payload.month,
        year=payload.year,
        created_at=payload.created_at,
    )
    return record.to_dict()


@router.get("", response_model=List[AssetOut])
def list_assets(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    store: LedgerStore = Depends(get_store),
):
    """
    Assets ordered by name, optionally filtered by month and/or year.
    """
    return [r.to_dict() for r in store.list(month=month, year=year)]


# -------------------------------------------------------------------
# Aggregates
# -------------------------------------------------------------------

@router.get("/months", response_model=List[MonthYear])
def available_months(store: LedgerStore = Depends(get_store)):
    """
    Months that have records, as {month, year} pairs, newest first.
    """
    return store.distinct_months()


@router.get("/years", response_model=List[int])
def available_years(store: LedgerStore = Depends(get_store)):
    """
    Years that have records, newest first.
    """
    return store.distinct_years()


@router.get("/performance/{year}", response_model=MonthlyTotals)
def monthly_performance(year: str, store: LedgerStore = Depends(get_store)):
    """
    Twelve monthly totals for `year` (index 0 = January); null where a
    month has no records.
    """
    return store.monthly_totals(year)


# -------------------------------------------------------------------
# Maintenance
# -------------------------------------------------------------------

@router.post("/fix-months", response_model=RepairOut)
def fix_months(store: LedgerStore = Depends(get_store)):
    """
    Fold any stored out-of-range month values into 0-11.
    """
    result = store.repair_month_values()

    if result["found"] == 0:
        message = "No invalid month values found."
    else:
        message = f"Fixed {result['fixed']} records with invalid month values."

    return {"message": message, **result}


# -------------------------------------------------------------------
# Update / delete
# -------------------------------------------------------------------

@router.put("/{asset_id}", response_model=AssetOut)
def update_asset(
    asset_id: int,
    payload: AssetUpdate,
    store: LedgerStore = Depends(get_store),
):
    """
    Partial update: only fields present in the body are changed.
    """
    fields = payload.model_dump(exclude_unset=True)
    return store.update(asset_id, fields).to_dict()


@router.delete("/{asset_id}", response_model=MessageOut)
def delete_asset(asset_id: int, store: LedgerStore = Depends(get_store)):
    store.delete(asset_id)
    return {"message": "Asset deleted successfully."}
