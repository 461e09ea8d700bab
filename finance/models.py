"""Database models for payment transactions, seller wallets and payouts."""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from orders.models import Order
from .exceptions import InsufficientBalance, WalletError


ZERO = Decimal('0.00')


def generate_payment_reference():
    return f"PAY-{uuid.uuid4().hex[:20].upper()}"


def generate_payout_reference():
    return f"PAYOUT-{int(timezone.now().timestamp())}-{uuid.uuid4().hex[:8].upper()}"


class Transaction(models.Model):
    """One payment attempt for an order, carrying the commission split.

    ``admin_fee`` and ``seller_amount`` are computed once at initialization
    and never re-derived, so later commission changes do not alter history.
    """

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('success', 'Success'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    )

    reference = models.CharField(max_length=100, unique=True, default=generate_payment_reference)
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name='transactions')
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='payments_made')
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='payments_received')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    admin_fee = models.DecimalField(max_digits=12, decimal_places=2)
    seller_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default='NGN')
    payment_method = models.CharField(max_length=20, default='card')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    gateway_response = models.JSONField(default=dict, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    wallet_credited = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['order', 'status'], name='tx_order_status_idx'),
            models.Index(fields=['seller', 'status'], name='tx_seller_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount=models.F('admin_fee') + models.F('seller_amount')),
                name='transaction_split_adds_up',
            ),
        ]

    def __str__(self):
        return f"{self.reference} ({self.status})"


class Wallet(models.Model):
    """Per-seller running balances.

    Money flows pending_balance -> balance -> locked_balance -> total_withdrawn.
    Every mutation goes through the methods below on a row locked with
    ``select_for_update``; together they keep
    ``balance + pending_balance + locked_balance + total_withdrawn == total_earnings``.
    """

    seller = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='wallet')
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    pending_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    locked_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total_earnings = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total_withdrawn = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total_admin_fees = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    currency = models.CharField(max_length=3, default='NGN')
    last_payout_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(balance__gte=0), name='wallet_balance_non_negative'),
            models.CheckConstraint(condition=models.Q(pending_balance__gte=0), name='wallet_pending_non_negative'),
            models.CheckConstraint(condition=models.Q(locked_balance__gte=0), name='wallet_locked_non_negative'),
        ]

    def __str__(self):
        return f"Wallet of {self.seller.username}"

    @property
    def available_balance(self):
        return self.balance

    def _save(self, *fields):
        self.save(update_fields=list(fields) + ['updated_at'])

    def add_earnings(self, seller_amount, admin_fee):
        """Hold a paid order's seller share in escrow."""
        self.pending_balance += seller_amount
        self.total_earnings += seller_amount
        self.total_admin_fees += admin_fee
        self._save('pending_balance', 'total_earnings', 'total_admin_fees')

    def confirm_earnings(self, amount):
        """Release escrowed funds so they can be withdrawn."""
        if amount > self.pending_balance:
            raise WalletError(f'Cannot release {amount}: only {self.pending_balance} pending.')
        self.pending_balance -= amount
        self.balance += amount
        self._save('pending_balance', 'balance')

    def reserve(self, amount):
        """Set aside withdrawable funds for a payout request."""
        if amount > self.balance:
            raise InsufficientBalance('Insufficient balance.')
        self.balance -= amount
        self.locked_balance += amount
        self._save('balance', 'locked_balance')

    def release(self, amount):
        """Return a reservation to the withdrawable balance (payout failed or cancelled)."""
        if amount > self.locked_balance:
            raise WalletError(f'Cannot release {amount}: only {self.locked_balance} reserved.')
        self.locked_balance -= amount
        self.balance += amount
        self._save('locked_balance', 'balance')

    def complete_withdrawal(self, amount):
        """Mark a reserved amount as paid out."""
        if amount > self.locked_balance:
            raise WalletError(f'Cannot withdraw {amount}: only {self.locked_balance} reserved.')
        self.locked_balance -= amount
        self.total_withdrawn += amount
        self.last_payout_date = timezone.now()
        self._save('locked_balance', 'total_withdrawn', 'last_payout_date')

    def reverse_withdrawal(self, amount):
        """Put back a completed payout that the bank returned."""
        if amount > self.total_withdrawn:
            raise WalletError(f'Cannot reverse {amount}: only {self.total_withdrawn} withdrawn.')
        self.total_withdrawn -= amount
        self.balance += amount
        self._save('total_withdrawn', 'balance')


class Payout(models.Model):
    """A seller's withdrawal request against their wallet balance."""

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('processing', 'Processing'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
        ('cancelled', 'Cancelled'),
    )
    METHOD_CHOICES = (
        ('bank', 'Bank transfer'),
        ('wallet', 'Wallet'),
    )

    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='payouts')
    wallet = models.ForeignKey(Wallet, on_delete=models.PROTECT, related_name='payouts')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reference = models.CharField(max_length=64, unique=True, default=generate_payout_reference)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    payout_method = models.CharField(max_length=10, choices=METHOD_CHOICES, default='bank')
    bank_details = models.JSONField(default=dict, blank=True)
    transfer_code = models.CharField(max_length=100, blank=True, default='')
    gateway_response = models.JSONField(default=dict, blank=True)
    admin_notes = models.TextField(blank=True, default='')
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='processed_payouts'
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['seller', 'status'], name='payout_seller_status_idx'),
            models.Index(fields=['status', 'created_at'], name='payout_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.reference} - {self.amount} ({self.status})"
