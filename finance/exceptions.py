"""Exceptions raised by the finance services and gateway client."""


class PaymentGatewayError(Exception):
    """The payment processor could not be reached or rejected the request."""

    def __init__(self, message, response=None):
        super().__init__(message)
        self.response = response or {}


class WalletError(Exception):
    """Base class for wallet bookkeeping violations."""


class InsufficientBalance(WalletError):
    pass


class SettlementError(Exception):
    """A payment, release or payout cannot move to the requested state.

    ``status_code`` is the HTTP status the API layer reports it with.
    """

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.status_code = status_code
