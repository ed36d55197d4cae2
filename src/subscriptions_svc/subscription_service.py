import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional

from subscriptions_svc.cost_calculator import OPEN_ENDED_HORIZON_YEARS, total_cost
from subscriptions_svc.exceptions import SubscriptionValidationError
from subscriptions_svc.models.subscription import Subscription
from subscriptions_svc.repository import SubscriptionRepository

UPDATABLE_FIELDS = ("service_name", "price", "start_date", "end_date")


class SubscriptionService:
    """
    Business operations on subscriptions: CRUD passthrough to the repository
    plus the total cost calculation.
    """

    def __init__(self, repository: SubscriptionRepository, horizon_years: int = OPEN_ENDED_HORIZON_YEARS) -> None:
        self.repository = repository
        self.horizon_years = horizon_years

    def create(self, data: Dict[str, Any]) -> uuid.UUID:
        logging.info("service.create: creating subscription")
        subscription = Subscription(**data)
        _check_range(subscription.start_date, subscription.end_date)
        subscription_id = self.repository.create(subscription)
        logging.info(f"service.create: subscription {subscription_id} created successfully")
        return subscription_id

    def get_by_id(self, subscription_id: uuid.UUID) -> Subscription:
        logging.info(f"service.get_by_id: getting subscription {subscription_id}")
        return self.repository.get_by_id(subscription_id)

    def list(self, limit: int, offset: int) -> List[Subscription]:
        logging.info(f"service.list: listing subscriptions limit={limit} offset={offset}")
        subscriptions = self.repository.list(limit, offset)
        logging.info(f"service.list: listed {len(subscriptions)} subscriptions")
        return subscriptions

    def update(self, subscription_id: uuid.UUID, changes: Dict[str, Any]) -> Subscription:
        """
        Apply a partial update. Only keys present in ``changes`` overwrite the
        stored values.

        :raises SubscriptionNotFoundError: if the subscription does not exist.
        :raises SubscriptionValidationError: on unknown fields or an inverted date range.
        """
        logging.info(f"service.update: updating subscription {subscription_id}")
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise SubscriptionValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        subscription = self.repository.get_by_id(subscription_id)
        start_date = changes.get("start_date", subscription.start_date)
        end_date = changes.get("end_date", subscription.end_date)
        _check_range(start_date, end_date)

        for field, value in changes.items():
            setattr(subscription, field, value)
        self.repository.update(subscription)
        logging.info(f"service.update: subscription {subscription_id} updated successfully")
        return subscription

    def delete(self, subscription_id: uuid.UUID) -> None:
        logging.info(f"service.delete: deleting subscription {subscription_id}")
        self.repository.delete(subscription_id)
        logging.info(f"service.delete: subscription {subscription_id} deleted successfully")

    def get_total_cost(
        self,
        user_id: uuid.UUID,
        service_name: Optional[str] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
        now: Optional[datetime.date] = None,
    ) -> int:
        """
        Total billed amount across all active months of the user's
        subscriptions matching the filters. Repository failures propagate.
        """
        logging.info(f"service.get_total_cost: computing total cost for user {user_id}")
        subscriptions = self.repository.fetch_filtered(user_id, service_name, start_date, end_date)
        result = total_cost(subscriptions, now=now, horizon_years=self.horizon_years)
        logging.info(
            f"service.get_total_cost: total cost {result.total} for user {user_id} "
            f"from {len(subscriptions)} subscriptions ({result.skipped} skipped)"
        )
        return result.total


def _check_range(start_date: Optional[datetime.date], end_date: Optional[datetime.date]) -> None:
    if start_date is None:
        raise SubscriptionValidationError("start_date is required")
    if end_date is not None and end_date < start_date:
        raise SubscriptionValidationError("end_date must not be before start_date")
