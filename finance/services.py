"""Payment settlement, escrow release and payout flows.

Each flow runs inside ``transaction.atomic()`` and takes row locks in a
fixed order (Transaction -> Order -> Wallet, Payout -> Wallet) so that a
verify call racing a webhook, or two payout requests racing each other,
serialize instead of double-applying. Gateway HTTP calls happen outside
database transactions.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounts.models import SellerProfile
from orders.models import Order
from .exceptions import InsufficientBalance, PaymentGatewayError, SettlementError, WalletError
from .gateway import get_gateway
from .models import Payout, Transaction, Wallet, generate_payment_reference
from .split import calculate_split

logger = logging.getLogger(__name__)


def _locked_wallet(seller_id):
    wallet, _ = Wallet.objects.select_for_update().get_or_create(seller_id=seller_id)
    return wallet


# ==========================================
# PAYMENTS
# ==========================================

def initialize_payment(order, buyer, email=None):
    """Open a hosted checkout for an unpaid order.

    Returns ``(transaction, gateway_data)``. Raises :class:`SettlementError`
    when the order cannot be paid and :class:`PaymentGatewayError` when the
    gateway call fails (nothing is written in that case).
    """
    if order.buyer_id != buyer.id:
        raise SettlementError('Order not found.', status_code=404)
    if order.is_paid:
        raise SettlementError('Order has already been paid.')
    if order.status == 'cancelled':
        raise SettlementError('Cancelled orders cannot be paid.')

    split = calculate_split(order.total_amount)
    reference = generate_payment_reference()
    metadata = {
        'order_id': order.id,
        'order_number': order.order_number,
        'buyer_id': buyer.id,
        'seller_id': order.seller_id,
        'admin_fee': str(split.admin_fee),
        'seller_amount': str(split.seller_amount),
    }

    gateway_data = get_gateway().initialize_payment(
        email=email or buyer.email,
        amount=split.total,
        reference=reference,
        callback_url=settings.PAYSTACK_CALLBACK_URL or None,
        metadata=metadata,
    )

    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.is_paid:
            raise SettlementError('Order has already been paid.')

        tx = Transaction.objects.create(
            reference=gateway_data.get('reference') or reference,
            order=order,
            buyer=buyer,
            seller_id=order.seller_id,
            amount=split.total,
            admin_fee=split.admin_fee,
            seller_amount=split.seller_amount,
            payment_method=order.payment_method,
            metadata=metadata,
        )
        order.payment_reference = tx.reference
        order.save(update_fields=['payment_reference', 'updated_at'])

    logger.info('Payment initialized for order %s: %s (%s)', order.order_number, tx.reference, split.total)
    return tx, gateway_data


def settle_successful_charge(reference, gateway_data=None):
    """Apply a successful charge exactly once.

    Returns ``(transaction, credited)``. ``credited`` is False when the
    charge had already been applied, when the reported amount is short
    (the transaction is marked failed), or when the order had already been
    paid by another transaction.
    """
    gateway_data = gateway_data or {}

    with transaction.atomic():
        try:
            tx = Transaction.objects.select_for_update().get(reference=reference)
        except Transaction.DoesNotExist:
            raise SettlementError('Transaction not found.', status_code=404)

        if tx.status != 'pending':
            logger.info('Charge %s already settled (status=%s); ignoring.', reference, tx.status)
            return tx, False

        raw = gateway_data.get('raw') or {}
        paid_amount = gateway_data.get('amount')
        if paid_amount is not None and paid_amount < tx.amount:
            logger.warning('Charge %s paid %s, expected %s; marking failed.', reference, paid_amount, tx.amount)
            tx.status = 'failed'
            tx.gateway_response = raw
            tx.save(update_fields=['status', 'gateway_response', 'updated_at'])
            return tx, False

        order = Order.objects.select_for_update().get(pk=tx.order_id)

        tx.status = 'success'
        tx.paid_at = timezone.now()
        tx.gateway_response = raw

        if order.is_paid:
            # Second successful charge for the same order; needs a manual refund.
            logger.warning('Order %s already paid; charge %s not credited.', order.order_number, reference)
            tx.save(update_fields=['status', 'paid_at', 'gateway_response', 'updated_at'])
            return tx, False

        order.payment_status = 'completed'
        order.payment_reference = tx.reference
        order.save(update_fields=['payment_status', 'payment_reference', 'updated_at'])

        wallet = _locked_wallet(tx.seller_id)
        wallet.add_earnings(tx.seller_amount, tx.admin_fee)

        tx.wallet_credited = True
        tx.save(update_fields=['status', 'paid_at', 'gateway_response', 'wallet_credited', 'updated_at'])

    logger.info('Charge %s settled: seller %s credited %s pending.', reference, tx.seller_id, tx.seller_amount)
    return tx, True


def mark_charge_failed(reference, gateway_data=None):
    with transaction.atomic():
        tx = Transaction.objects.select_for_update().filter(reference=reference).first()
        if tx is None or tx.status != 'pending':
            return tx
        tx.status = 'failed'
        tx.gateway_response = (gateway_data or {}).get('raw') or {}
        tx.save(update_fields=['status', 'gateway_response', 'updated_at'])

    logger.info('Charge %s marked failed.', reference)
    return tx


# ==========================================
# ESCROW RELEASE
# ==========================================

def release_order_funds(order_id):
    """Move a delivered order's seller share from pending to withdrawable.

    Returns ``(order, transaction, wallet)``.
    """
    with transaction.atomic():
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise SettlementError('Order not found.', status_code=404)

        if order.status != 'delivered':
            raise SettlementError('Funds can only be released for delivered orders.')
        if order.funds_released:
            raise SettlementError('Funds already released for this order.')

        tx = order.transactions.filter(status='success', wallet_credited=True).first()
        if tx is None:
            raise SettlementError('No completed payment found for this order.', status_code=404)

        wallet = _locked_wallet(order.seller_id)
        wallet.confirm_earnings(tx.seller_amount)

        order.funds_released = True
        order.funds_released_at = timezone.now()
        order.save(update_fields=['funds_released', 'funds_released_at', 'updated_at'])

    logger.info('Released %s to seller %s for order %s.', tx.seller_amount, order.seller_id, order.order_number)
    return order, tx, wallet


def release_due_escrow(now=None, days=None):
    """Release funds for delivered orders whose escrow period has passed.

    Returns the list of orders released.
    """
    now = now or timezone.now()
    days = settings.ESCROW_AUTO_RELEASE_DAYS if days is None else days
    cutoff = now - timedelta(days=days)

    due = Order.objects.filter(
        status='delivered',
        payment_status='completed',
        funds_released=False,
        delivered_at__lte=cutoff,
    ).values_list('pk', flat=True)

    released = []
    for order_id in list(due):
        try:
            order, _, _ = release_order_funds(order_id)
        except (SettlementError, WalletError) as e:
            logger.warning('Auto-release skipped for order %s: %s', order_id, e)
            continue
        released.append(order)
    return released


# ==========================================
# PAYOUTS
# ==========================================

def request_payout(seller, amount, payout_method='bank'):
    """Create a pending payout and reserve its amount in the same transaction."""
    profile = SellerProfile.objects.filter(user=seller).first()
    if payout_method == 'bank' and (profile is None or not profile.has_bank_details):
        raise SettlementError('Please add your bank details before requesting a bank payout.')

    with transaction.atomic():
        wallet = _locked_wallet(seller.id)
        try:
            wallet.reserve(amount)
        except InsufficientBalance:
            raise SettlementError('Insufficient balance.')

        payout = Payout.objects.create(
            seller=seller,
            wallet=wallet,
            amount=amount,
            payout_method=payout_method,
            bank_details=profile.bank_details_snapshot() if (profile and payout_method == 'bank') else {},
        )

    logger.info('Payout %s requested by seller %s: %s', payout.reference, seller.id, amount)
    return payout


def cancel_payout(payout_id, seller=None, admin=None, notes=''):
    """Cancel a pending payout and return its reservation to the balance.

    Sellers may cancel their own requests; admins reject any pending one.
    """
    with transaction.atomic():
        qs = Payout.objects.select_for_update()
        if seller is not None:
            qs = qs.filter(seller=seller)
        payout = qs.filter(pk=payout_id).first()
        if payout is None:
            raise SettlementError('Payout not found.', status_code=404)
        if payout.status != 'pending':
            raise SettlementError(f'Only pending payouts can be cancelled (current status: {payout.status}).')

        wallet = _locked_wallet(payout.seller_id)
        wallet.release(payout.amount)

        payout.status = 'cancelled'
        if admin is not None:
            payout.processed_by = admin
            payout.processed_at = timezone.now()
        if notes:
            payout.admin_notes = notes
        payout.save()

    logger.info('Payout %s cancelled.', payout.reference)
    return payout


def _complete_payout(payout_id, gateway_response=None):
    with transaction.atomic():
        payout = Payout.objects.select_for_update().get(pk=payout_id)
        if payout.status not in ('pending', 'processing'):
            return payout
        wallet = _locked_wallet(payout.seller_id)
        wallet.complete_withdrawal(payout.amount)
        payout.status = 'completed'
        payout.completed_at = timezone.now()
        if gateway_response is not None:
            payout.gateway_response = gateway_response
        payout.save()

    logger.info('Payout %s completed.', payout.reference)
    return payout


def _fail_payout(payout_id, notes='', gateway_response=None):
    with transaction.atomic():
        payout = Payout.objects.select_for_update().get(pk=payout_id)
        wallet = _locked_wallet(payout.seller_id)
        if payout.status in ('pending', 'processing'):
            wallet.release(payout.amount)
        elif payout.status == 'completed':
            wallet.reverse_withdrawal(payout.amount)
        else:
            return payout
        payout.status = 'failed'
        if notes:
            payout.admin_notes = notes
        if gateway_response is not None:
            payout.gateway_response = gateway_response
        payout.save()

    logger.warning('Payout %s failed: %s', payout.reference, notes)
    return payout


def _ensure_recipient(payout):
    """Return a transfer recipient for the account snapshotted on the payout.

    The profile's cached ``recipient_code`` is only reused while the profile
    still points at that same account.
    """
    details = payout.bank_details or {}
    if not details.get('bank_code') or not details.get('account_number'):
        raise PaymentGatewayError('Seller bank code and account number are required for transfers.')

    profile = SellerProfile.objects.filter(user_id=payout.seller_id).first()
    same_account = (
        profile is not None
        and profile.account_number == details['account_number']
        and profile.bank_code == details['bank_code']
    )
    if same_account and profile.recipient_code:
        return profile.recipient_code

    recipient = get_gateway().create_transfer_recipient(
        account_number=details['account_number'],
        bank_code=details['bank_code'],
        name=details.get('account_name') or payout.seller.get_full_name() or payout.seller.username,
    )
    if same_account:
        profile.recipient_code = recipient.get('recipient_code')
        profile.save(update_fields=['recipient_code'])
    return recipient.get('recipient_code')


def process_payout(payout_id, admin):
    """Pay out a pending request.

    Bank payouts go through a gateway transfer; a synchronous success
    completes the payout, a pending transfer waits for the ``transfer.*``
    webhook, and a gateway error fails the payout and re-raises.
    Wallet payouts are settled off-platform and complete immediately.
    """
    with transaction.atomic():
        payout = Payout.objects.select_for_update().select_related('seller').filter(pk=payout_id).first()
        if payout is None:
            raise SettlementError('Payout not found.', status_code=404)
        if payout.status != 'pending':
            raise SettlementError(f'Payout is already {payout.status}.')
        payout.status = 'processing'
        payout.processed_by = admin
        payout.processed_at = timezone.now()
        payout.save(update_fields=['status', 'processed_by', 'processed_at', 'updated_at'])

    if payout.payout_method == 'wallet':
        return _complete_payout(payout.pk)

    try:
        recipient_code = _ensure_recipient(payout)
        result = get_gateway().initiate_transfer(
            recipient_code=recipient_code,
            amount=payout.amount,
            reason=f'Marketplace payout {payout.reference}',
            reference=payout.reference,
        )
    except PaymentGatewayError as e:
        _fail_payout(payout.pk, notes=f'Transfer failed: {e}', gateway_response=e.response)
        raise

    raw = result.get('raw') or {}
    transfer_status = result.get('status')
    Payout.objects.filter(pk=payout.pk).update(transfer_code=result.get('transfer_code') or '', gateway_response=raw)

    if transfer_status == 'success':
        return _complete_payout(payout.pk, gateway_response=raw)
    if transfer_status in ('failed', 'reversed'):
        return _fail_payout(payout.pk, notes=f'Transfer {transfer_status}.', gateway_response=raw)

    logger.info('Payout %s awaiting transfer confirmation (status=%s).', payout.reference, transfer_status)
    payout.refresh_from_db()
    return payout


def handle_transfer_event(event, data):
    """Finalize a payout from a ``transfer.success|failed|reversed`` webhook."""
    reference = (data or {}).get('reference')
    payout = Payout.objects.filter(reference=reference).first() if reference else None
    if payout is None:
        logger.info('Transfer event %s for unknown reference %s ignored.', event, reference)
        return None

    if event == 'transfer.success':
        return _complete_payout(payout.pk, gateway_response=data)
    return _fail_payout(payout.pk, notes=f'Gateway reported {event}.', gateway_response=data)
