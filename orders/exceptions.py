"""Typed errors raised by the order lifecycle.

They are DRF `APIException` subclasses so views can let them propagate and
DRF renders the right status code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class PreconditionFailed(APIException):
    """The requested action is not allowed in the order's current state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This action is not allowed for the order in its current state."
    default_code = "precondition_failed"


class TransitionConflict(APIException):
    """The order changed since it was read; re-fetch and decide again."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The order was changed by someone else. Reload it and try again."
    default_code = "conflict"


class AlreadyReviewed(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You have already submitted a review for this order."
    default_code = "already_reviewed"

    def __init__(self, review=None, detail=None, code=None):
        super().__init__(detail=detail, code=code)
        self.review = review


class PaymentFailed(APIException):
    """The card charge was not confirmed by the payment gateway."""

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "The payment has not been completed."
    default_code = "payment_failed"


class PaymentGatewayError(APIException):
    """The payment gateway could not be reached or rejected the request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "The payment provider is unavailable. No charge was made."
    default_code = "payment_gateway_error"


class PaymentIntentReused(PreconditionFailed):
    """The card payment was already recorded on another order."""

    default_detail = "This payment has already been used for another order."
    default_code = "payment_intent_reused"
