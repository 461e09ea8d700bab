"""Django admin configuration for orders and related models."""

from django.contrib import admin
from .models import Order, OrderLine
from finance.models import Transaction

# 1. عرض منتجات الطلب في جدول منظم
class OrderLineInline(admin.TabularInline):
    """Inline display of order line items."""

    model = OrderLine
    extra = 0
    # الأسعار لقطة وقت الشراء، للقراءة فقط
    readonly_fields = ('product', 'product_name', 'price', 'quantity')
    can_delete = False

# 2. بيانات الدفع المرتبطة بالطلب
class TransactionInline(admin.StackedInline):
    """Inline display of the order's payment attempts."""

    model = Transaction
    extra = 0
    can_delete = False
    # المعاملات تأتي من بوابة الدفع فقط
    max_num = 0

    def get_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields if f.name != 'id']

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

# 3. تسجيل الطلب الرئيسي
@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin configuration for marketplace orders."""

    list_display = ('order_number', 'buyer', 'seller', 'total_amount', 'status', 'payment_status', 'funds_released', 'created_at')
    list_filter = ('status', 'payment_status', 'funds_released', 'created_at')
    search_fields = ('order_number', 'buyer__username', 'seller__username', 'payment_reference')
    readonly_fields = ('order_number', 'total_amount', 'payment_reference', 'funds_released', 'funds_released_at', 'created_at', 'updated_at')

    inlines = [OrderLineInline, TransactionInline]
