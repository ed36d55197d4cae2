import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from subscriptions_svc.config import settings
from subscriptions_svc.cost_calculator import parse_month
from subscriptions_svc.exceptions import StoreError, SubscriptionNotFoundError, SubscriptionValidationError
from subscriptions_svc.models.base import get_db
from subscriptions_svc.repository import SubscriptionRepository
from subscriptions_svc.schemas import (
    SubscriptionCreate,
    SubscriptionCreated,
    SubscriptionOut,
    SubscriptionUpdate,
    TotalCostOut,
)
from subscriptions_svc.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_subscription_service(db=Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(db), horizon_years=settings.cost_horizon_years)


def _parse_uuid(value: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        logging.error(f"Invalid {name}: {value!r}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid {name}")


def _parse_month_param(value: Optional[str], name: str):
    if value is None or value.strip() == "":
        return None
    try:
        return parse_month(value)
    except ValueError:
        logging.error(f"Invalid {name}: {value!r}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid {name}, expected MM-YYYY")


def _not_found(e: SubscriptionNotFoundError) -> HTTPException:
    logging.warning(e)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="subscription not found")


def _store_failure(e: StoreError, operation: str) -> HTTPException:
    logging.error(e, exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"failed to {operation}")


@router.post("", status_code=201, response_model=SubscriptionCreated)
def create_subscription(
    create_request: SubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
):
    try:
        subscription_id = service.create(create_request.model_dump())
    except SubscriptionValidationError as ve:
        logging.error(ve)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))
    except StoreError as e:
        raise _store_failure(e, "create subscription")
    return {"id": subscription_id}


@router.get("", status_code=200, response_model=List[SubscriptionOut])
def list_subscriptions(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: SubscriptionService = Depends(get_subscription_service),
):
    try:
        return service.list(limit, offset)
    except StoreError as e:
        raise _store_failure(e, "list subscriptions")


@router.get("/total_cost", status_code=200, response_model=TotalCostOut)
def get_total_cost(
    user_id: str = Query(..., description="User ID"),
    service_name: Optional[str] = Query(None, description="Service name"),
    start_date: Optional[str] = Query(None, description="Start date (MM-YYYY)"),
    end_date: Optional[str] = Query(None, description="End date (MM-YYYY)"),
    service: SubscriptionService = Depends(get_subscription_service),
):
    parsed_user_id = _parse_uuid(user_id, "user_id")
    start = _parse_month_param(start_date, "start_date")
    end = _parse_month_param(end_date, "end_date")
    try:
        total = service.get_total_cost(parsed_user_id, service_name or None, start, end)
    except StoreError as e:
        raise _store_failure(e, "get total cost")
    return {"total_cost": total}


@router.get("/{subscription_id}", status_code=200, response_model=SubscriptionOut)
def get_subscription(subscription_id: str, service: SubscriptionService = Depends(get_subscription_service)):
    parsed_id = _parse_uuid(subscription_id, "id")
    try:
        return service.get_by_id(parsed_id)
    except SubscriptionNotFoundError as e:
        raise _not_found(e)
    except StoreError as e:
        raise _store_failure(e, "get subscription")


@router.put("/{subscription_id}", status_code=204, response_class=Response)
def update_subscription(
    subscription_id: str,
    update_request: SubscriptionUpdate,
    service: SubscriptionService = Depends(get_subscription_service),
):
    parsed_id = _parse_uuid(subscription_id, "id")
    try:
        service.update(parsed_id, update_request.model_dump(exclude_unset=True))
    except SubscriptionNotFoundError as e:
        raise _not_found(e)
    except SubscriptionValidationError as ve:
        logging.error(ve)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))
    except StoreError as e:
        raise _store_failure(e, "update subscription")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{subscription_id}", status_code=204, response_class=Response)
def delete_subscription(subscription_id: str, service: SubscriptionService = Depends(get_subscription_service)):
    parsed_id = _parse_uuid(subscription_id, "id")
    try:
        service.delete(parsed_id)
    except SubscriptionNotFoundError as e:
        raise _not_found(e)
    except StoreError as e:
        raise _store_failure(e, "delete subscription")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
