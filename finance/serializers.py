"""Serializers for payments, wallets and payouts."""

from decimal import Decimal

from rest_framework import serializers

from .models import Payout, Transaction, Wallet


class InitializePaymentSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    email = serializers.EmailField(required=False)


class TransactionSerializer(serializers.ModelSerializer):
    order_number = serializers.ReadOnlyField(source='order.order_number')

    class Meta:
        model = Transaction
        fields = (
            'id', 'reference', 'order', 'order_number', 'buyer', 'seller', 'amount', 'admin_fee',
            'seller_amount', 'currency', 'payment_method', 'status', 'paid_at', 'created_at',
        )
        read_only_fields = fields


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = (
            'balance', 'pending_balance', 'locked_balance', 'total_earnings',
            'total_withdrawn', 'total_admin_fees', 'currency', 'last_payout_date',
        )
        read_only_fields = fields


class PayoutSerializer(serializers.ModelSerializer):
    seller_username = serializers.ReadOnlyField(source='seller.username')

    class Meta:
        model = Payout
        fields = (
            'id', 'reference', 'seller', 'seller_username', 'amount', 'status', 'payout_method',
            'bank_details', 'transfer_code', 'admin_notes', 'processed_at', 'completed_at', 'created_at',
        )
        read_only_fields = fields


class PayoutRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    payout_method = serializers.ChoiceField(choices=Payout.METHOD_CHOICES, default='bank')

    def validate(self, attrs):
        amount = attrs.get('amount')
        if amount is None or amount <= Decimal('0'):
            raise serializers.ValidationError({'detail': 'Valid amount required.'})
        return attrs


class PayoutDecisionSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')
