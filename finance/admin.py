"""Django admin configuration for finance models."""

from django.contrib import admin
from .models import Payout, Transaction, Wallet


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin configuration for payment transactions (read-only money fields)."""

    list_display = ('reference', 'get_order_number', 'seller', 'amount', 'admin_fee', 'seller_amount', 'status', 'created_at')
    list_filter = ('status', 'payment_method', 'created_at')
    search_fields = ('reference', 'order__order_number', 'buyer__username', 'seller__username')
    readonly_fields = (
        'reference', 'order', 'buyer', 'seller', 'amount', 'admin_fee', 'seller_amount',
        'wallet_credited', 'gateway_response', 'metadata', 'paid_at', 'created_at', 'updated_at',
    )

    def get_order_number(self, obj):
        """Render the order number in a friendly format."""
        return obj.order.order_number
    get_order_number.short_description = 'Order'


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    """Wallets are changed only through settlement flows, never by hand."""

    list_display = ('seller', 'balance', 'pending_balance', 'locked_balance', 'total_earnings', 'total_withdrawn', 'last_payout_date')
    search_fields = ('seller__username', 'seller__email')
    readonly_fields = (
        'seller', 'balance', 'pending_balance', 'locked_balance', 'total_earnings',
        'total_withdrawn', 'total_admin_fees', 'last_payout_date', 'created_at', 'updated_at',
    )

    def has_add_permission(self, request):
        return False


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    """Admin configuration for payout requests."""

    list_display = ('reference', 'seller', 'amount', 'payout_method', 'status', 'created_at', 'completed_at')
    list_filter = ('status', 'payout_method', 'created_at')
    search_fields = ('reference', 'seller__username', 'transfer_code')
    readonly_fields = (
        'reference', 'seller', 'wallet', 'amount', 'status', 'payout_method', 'bank_details', 'transfer_code',
        'gateway_response', 'processed_by', 'processed_at', 'completed_at', 'created_at', 'updated_at',
    )
