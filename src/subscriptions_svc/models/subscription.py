import uuid

from sqlalchemy import Column, Date, Integer, String, Uuid
from subscriptions_svc.models.base import Base


class Subscription(Base):
    """
    A user's subscription to a paid service, billed monthly from start_date
    through end_date (open-ended when end_date is null). Dates are stored as
    the first day of their month.
    """
    __tablename__ = 'subscriptions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    service_name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    user_id = Column(Uuid, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name={self.service_name}, price={self.price}, "
            f"start_date={self.start_date}, end_date={self.end_date})>"
        )
