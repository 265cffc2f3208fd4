"""
Dekoji API routes.

POST /api/dekoji/plan                   Full out-feed plan for a day
POST /api/dekoji/lots                   Ordered lots only
POST /api/dekoji/allocation             Shelf allocation for given lots
POST /api/dekoji/true-yield             Corrected yield rate
POST /api/dekoji/storage-classification Storage handling for two dates
POST /api/dekoji/result-updates         Derived fields to write back

A shelf overflow is a normal 200 response with status "capacity_exceeded".
"""

from typing import List, Union

from fastapi import APIRouter, HTTPException
import structlog

from config.settings import settings
from exceptions import AppError
from models.dekoji import (
    AllocationRequest,
    DekojiPlan,
    DekojiPlanRequest,
    DekojiResultUpdate,
    ResultUpdatesRequest,
    StorageClassificationRequest,
    StorageClassificationResponse,
    TrueYieldRequest,
    TrueYieldResponse,
)
from models.koji import Lot, ShelfAllocation, ShelfCapacityExceeded
from services.dekoji_service import get_dekoji_service
from services.lot_service import get_lot_service
from services.shelf_allocation_service import get_shelf_allocation_service
from services.storage_service import classify_storage, storage_gap_days
from services.yield_service import calculate_true_yield_rate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/dekoji", tags=["Dekoji"])


@router.post("/plan", response_model=DekojiPlan)
def plan_day(data: DekojiPlanRequest) -> DekojiPlan:
    """
    Plan one out-feed day.

    Returns the lots in out-feed order, the shelf allocation (or the
    capacity overflow) and the day totals.
    """
    logger.info(
        "dekoji_plan_request",
        record_count=len(data.records),
        completion_date=data.completion_date.isoformat() if data.completion_date else None,
        yield_rate=data.yield_rate,
    )

    service = get_dekoji_service()
    try:
        return service.plan_day(
            data.records,
            completion_date=data.completion_date,
            yield_rate=data.yield_rate,
        )
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("/lots", response_model=List[Lot])
def aggregate_lots(data: DekojiPlanRequest) -> List[Lot]:
    """Lots in out-feed order, without shelf placement."""
    service = get_dekoji_service()
    records = data.records
    if data.completion_date is not None:
        records = service.select_day_records(records, data.completion_date)

    saved_rate = service.saved_values(records)[0]
    yield_rate = data.yield_rate or saved_rate or settings.default_yield_rate
    return get_lot_service().aggregate_lots(records, yield_rate)


@router.post(
    "/allocation",
    response_model=Union[ShelfAllocation, ShelfCapacityExceeded],
)
def allocate_lots(data: AllocationRequest):
    """Place already-built lots on the shelf."""
    return get_shelf_allocation_service().allocate(data.lots)


@router.post("/true-yield", response_model=TrueYieldResponse)
def true_yield(data: TrueYieldRequest) -> TrueYieldResponse:
    """
    Corrected yield rate from the measured last sheet.

    Needs more than 10 kg of rice in total; otherwise 422.
    """
    try:
        rate = calculate_true_yield_rate(
            data.total_rice_weight_kg,
            data.predicted_rate,
            data.measured_last_sheet_weight_kg,
        )
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())

    return TrueYieldResponse(
        true_yield_rate=rate,
        total_rice_weight_kg=data.total_rice_weight_kg,
        predicted_rate=data.predicted_rate,
        measured_last_sheet_weight_kg=data.measured_last_sheet_weight_kg,
    )


@router.post("/storage-classification", response_model=StorageClassificationResponse)
def storage_classification(data: StorageClassificationRequest) -> StorageClassificationResponse:
    """Storage handling for a completion date and an addition date."""
    return StorageClassificationResponse(
        storage_type=classify_storage(data.completion_date, data.addition_date),
        gap_days=storage_gap_days(data.completion_date, data.addition_date),
    )


@router.post("/result-updates", response_model=List[DekojiResultUpdate])
def result_updates(data: ResultUpdatesRequest) -> List[DekojiResultUpdate]:
    """Per-record write-backs for the persistence layer."""
    return get_dekoji_service().build_result_updates(
        data.lots,
        yield_rate=data.yield_rate,
        last_sheet_weight_kg=data.last_sheet_weight_kg,
        actual_yield_rate=data.actual_yield_rate,
    )
