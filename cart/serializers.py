"""DRF serializers for cart APIs."""

from rest_framework import serializers

from products.serializers import image_value_to_url
from .models import ShoppingCart, ShoppingCartItem


class ShoppingCartItemSerializer(serializers.ModelSerializer):
    """Serializer for cart line items.

    Normalizes field names for the frontend (``qty`` -> ``quantity``).
    """

    product_name = serializers.ReadOnlyField(source='product.name')
    price = serializers.ReadOnlyField(source='product.price')
    image = serializers.SerializerMethodField()
    seller = serializers.ReadOnlyField(source='product.seller_id')

    # التحويل من 'qty' في الموديل إلى 'quantity'
    quantity = serializers.IntegerField(source='qty', min_value=1)

    # expose stock for UI limits
    stock = serializers.IntegerField(source='product.stock', read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = ShoppingCartItem
        fields = ['id', 'product', 'product_name', 'seller', 'image', 'price', 'stock', 'quantity', 'subtotal']

    def validate(self, attrs):
        """Validate quantity against stock and product availability."""
        product = attrs.get('product')
        if product is None and self.instance is not None:
            product = self.instance.product

        desired_qty = attrs.get('qty')
        if desired_qty is None and self.instance is not None:
            desired_qty = self.instance.qty

        if product is None:
            return attrs

        if product.status != 'active':
            raise serializers.ValidationError({'product': 'This product is not available.'})

        if desired_qty is not None and desired_qty > product.stock:
            raise serializers.ValidationError({'quantity': f'Only {product.stock} item(s) available in stock.'})

        return attrs

    def get_image(self, obj):
        return image_value_to_url(obj.product.product_image, request=self.context.get('request'))


class ShoppingCartSerializer(serializers.ModelSerializer):
    """Serializer for the shopping cart including nested items."""

    items = ShoppingCartItemSerializer(many=True, read_only=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = ShoppingCart
        fields = ['id', 'user', 'items', 'item_count', 'total_price']

    def get_item_count(self, obj):
        return sum(item.qty for item in obj.items.all())
