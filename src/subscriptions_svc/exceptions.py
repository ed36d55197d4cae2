class SubscriptionNotFoundError(Exception):
    """Raised when no subscription exists for the requested id."""

    def __init__(self, subscription_id) -> None:
        super().__init__(f"Subscription {subscription_id} not found")
        self.subscription_id = subscription_id


class SubscriptionValidationError(ValueError):
    """Raised for malformed or inconsistent subscription input."""


class StoreError(Exception):
    """Raised when the underlying database operation fails."""
