"""Serializers for the product catalog."""

from rest_framework import serializers

from .models import ProductCategory, Product


def image_value_to_url(value, *, request=None):
    """Return a usable URL for an ImageField value.

    Absolute URLs stored in the field are returned as-is; real media files
    go through ``.url`` (made absolute when a request is available).
    """

    if not value:
        return None

    raw = str(value)
    if raw.startswith('http://') or raw.startswith('https://'):
        return raw

    try:
        url = value.url
    except ValueError:
        return raw

    if request is not None:
        return request.build_absolute_uri(url)
    return url


class ProductCategorySerializer(serializers.ModelSerializer):
    """Product category serializer."""

    class Meta:
        model = ProductCategory
        fields = '__all__'


class ProductSerializer(serializers.ModelSerializer):
    """Product serializer used for public listing and seller CRUD."""

    category_name = serializers.ReadOnlyField(source='category.category_name')
    # اسم البائع للقراءة فقط لتحسين عرض البيانات
    seller_name = serializers.ReadOnlyField(source='seller.username')
    image_url = serializers.SerializerMethodField()
    is_available = serializers.ReadOnlyField()
    low_stock = serializers.ReadOnlyField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'price', 'stock', 'status', 'sku', 'brand',
            'product_image', 'image_url', 'featured', 'sales_count', 'is_available', 'low_stock',
            'category', 'category_name', 'seller', 'seller_name', 'created_at', 'updated_at',
        ]
        # الـ seller بيتحدد من المستخدم المسجل حالياً
        read_only_fields = ['seller', 'sales_count', 'created_at', 'updated_at']
        extra_kwargs = {
            'product_image': {'write_only': True, 'required': False},
            'sku': {'required': False},
        }

    def get_image_url(self, obj):
        request = self.context.get('request')
        return image_value_to_url(obj.product_image, request=request)

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError('Price must be greater than zero.')
        return value

    def validate_description(self, value):
        if len((value or '').strip()) < 20:
            raise serializers.ValidationError('Description must be at least 20 characters.')
        return value

    def validate_status(self, value):
        if value == 'out_of_stock':
            raise serializers.ValidationError('Out of stock is set automatically from the stock level.')
        return value


class ProductStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('draft', 'Draft')])
    stock = serializers.IntegerField(required=False, min_value=0)
