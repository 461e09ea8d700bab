"""Django admin configuration for product catalog models."""

import csv
from django.contrib import admin
from django.utils.html import format_html
from django.http import HttpResponse
from .models import ProductCategory, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin configuration for products, with stock highlighting and CSV export."""

    list_display = ('name', 'sku', 'seller', 'category', 'price', 'colored_stock', 'status', 'sales_count')
    search_fields = ('name', 'sku', 'seller__username')
    list_filter = ('status', 'featured', 'category')
    readonly_fields = ('sales_count', 'created_at', 'updated_at')
    actions = ['export_to_csv']

    def export_to_csv(self, request, queryset):
        """Export selected products as a CSV inventory report."""
        response = HttpResponse(content_type='text/csv; charset=utf-8-sig')
        response['Content-Disposition'] = 'attachment; filename="inventory_report.csv"'

        writer = csv.writer(response)
        writer.writerow(['SKU', 'Product', 'Seller', 'Price', 'Stock', 'Status'])
        for product in queryset.select_related('seller'):
            writer.writerow([product.sku, product.name, product.seller.username, product.price, product.stock, product.status])
        return response
    export_to_csv.short_description = "Export selected products to CSV"

    # تلوين المخزن
    def colored_stock(self, obj):
        """Render stock in color to highlight low inventory."""
        stock = obj.stock
        if stock <= 3:
            color = 'red'
        elif stock <= 10:
            color = 'orange'
        else:
            color = 'green'
        return format_html('<b style="color: {};">{}</b>', color, stock)

    colored_stock.short_description = 'Stock'
    colored_stock.admin_order_field = 'stock'


@admin.register(ProductCategory)
class ProductCategoryAdmin(admin.ModelAdmin):
    """Admin configuration for product categories."""

    list_display = ('category_name', 'parent_category')
