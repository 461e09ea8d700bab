"""DRF serializers for orders APIs."""

from rest_framework import serializers

from products.models import Product
from .models import Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    """
    عرض تفاصيل المنتجات المشتراة داخل كل طلب.
    """
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLine
        fields = ['id', 'product', 'product_name', 'quantity', 'price', 'subtotal']


class OrderSerializer(serializers.ModelSerializer):
    """
    المحول الرئيسي للطلب: يربط بيانات الطلب بمنتجاته وبحالته المالية.
    """
    lines = OrderLineSerializer(many=True, read_only=True)
    buyer_username = serializers.ReadOnlyField(source='buyer.username')
    seller_username = serializers.ReadOnlyField(source='seller.username')
    seller_business_name = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    can_cancel = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'buyer', 'buyer_username', 'seller', 'seller_username', 'seller_business_name',
            'total_amount', 'payment_method', 'payment_status', 'payment_reference',
            'status', 'status_display', 'can_cancel',
            'shipping_name', 'shipping_address', 'shipping_city', 'shipping_state',
            'shipping_zip_code', 'shipping_country', 'shipping_phone',
            'carrier', 'tracking_number', 'estimated_delivery', 'shipped_at', 'delivered_at',
            'cancelled_at', 'cancellation_reason', 'buyer_notes',
            'funds_released', 'funds_released_at', 'created_at', 'updated_at', 'lines',
        ]
        read_only_fields = fields

    def get_seller_business_name(self, obj):
        profile = getattr(obj.seller, 'seller_profile', None)
        return getattr(profile, 'business_name', None)

    def get_can_cancel(self, obj):
        return obj.status in ('pending', 'confirmed') and not obj.is_paid


class CheckoutItemSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.IntegerField(min_value=1)


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    country = serializers.CharField(max_length=100, required=False, default='Nigeria')
    phone = serializers.CharField(max_length=20)


class CheckoutSerializer(serializers.Serializer):
    """Checkout payload.

    ``items`` is optional; when omitted the buyer's cart is checked out.
    """

    items = CheckoutItemSerializer(many=True, required=False)
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES, default='card')
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required.')
        return value


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c in Order.STATUS_CHOICES if c[0] != 'refunded'])
    carrier = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tracking_number = serializers.CharField(max_length=120, required=False, allow_blank=True)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)


class OrderCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
