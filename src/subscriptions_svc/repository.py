import datetime
import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from subscriptions_svc.exceptions import StoreError, SubscriptionNotFoundError
from subscriptions_svc.models.subscription import Subscription


class SubscriptionRepository:
    """
    Persistence operations for Subscription records on top of a SQLAlchemy
    session. Database failures are rolled back and re-raised as StoreError.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _fail(self, operation: str, error: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logging.error(f"repository.{operation} failed: {error}", exc_info=True)
        return StoreError(f"repository.{operation}: {error}")

    def create(self, subscription: Subscription) -> uuid.UUID:
        try:
            self.db.add(subscription)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("create", e) from e
        logging.info(f"Subscription {subscription.id} created for user {subscription.user_id}")
        return subscription.id

    def get_by_id(self, subscription_id: uuid.UUID) -> Subscription:
        logging.info(f"repository: getting subscription {subscription_id}")
        try:
            subscription = self.db.query(Subscription).filter(Subscription.id == subscription_id).first()
        except SQLAlchemyError as e:
            raise self._fail("get_by_id", e) from e
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        return subscription

    def list(self, limit: int, offset: int) -> List[Subscription]:
        try:
            return (
                self.db.query(Subscription)
                .order_by(Subscription.start_date, Subscription.id)
                .limit(limit)
                .offset(offset)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("list", e) from e

    def update(self, subscription: Subscription) -> None:
        try:
            self.db.add(subscription)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e

    def delete(self, subscription_id: uuid.UUID) -> None:
        try:
            deleted = self.db.query(Subscription).filter(Subscription.id == subscription_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        if not deleted:
            raise SubscriptionNotFoundError(subscription_id)

    def fetch_filtered(
        self,
        user_id: uuid.UUID,
        service_name: Optional[str] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Subscription]:
        """
        Fetch a user's subscriptions matching every supplied filter.

        :param service_name: exact match on the service name.
        :param start_date: lower bound on the subscription's own start.
        :param end_date: the subscription matches when it has no end or ends
            on or before this date.
        """
        query = self.db.query(Subscription).filter(Subscription.user_id == user_id)
        if service_name:
            query = query.filter(Subscription.service_name == service_name)
        if start_date is not None:
            query = query.filter(Subscription.start_date >= start_date)
        if end_date is not None:
            query = query.filter(or_(Subscription.end_date.is_(None), Subscription.end_date <= end_date))
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise self._fail("fetch_filtered", e) from e
