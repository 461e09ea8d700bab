"""Database models for the product catalog."""

import time
import uuid

from django.db import models
from django.db.models import F
from django.conf import settings # لاستدعاء موديل المستخدم بأمان


# 1. جداول التصنيفات
class ProductCategory(models.Model):
    """Product category with optional parent-child hierarchy."""

    parent_category = models.ForeignKey('self', on_delete=models.SET_NULL, null=True, blank=True, related_name='subcategories')
    category_name = models.CharField(max_length=255)

    def __str__(self):
        return self.category_name
    class Meta:
        verbose_name_plural = "Product Categories"


def generate_sku():
    stamp = format(int(time.time() * 1000), 'x')
    return f"SKU-{stamp}-{uuid.uuid4().hex[:5]}".upper()


# 2. جدول المنتجات الأساسي
class Product(models.Model):
    """Purchasable listing owned by a seller.

    ``stock`` and ``status`` move together: selling the last unit marks the
    product out of stock, restocking it makes it active again.
    """

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('out_of_stock', 'Out of stock'),
        ('draft', 'Draft'),
    )

    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='products',
        limit_choices_to={'user_type': 'seller'}
    )
    category = models.ForeignKey(ProductCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    name = models.CharField(max_length=200)
    description = models.TextField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    sku = models.CharField(max_length=64, unique=True, blank=True)
    brand = models.CharField(max_length=100, blank=True, default='')
    product_image = models.ImageField(upload_to='products/', null=True, blank=True)
    featured = models.BooleanField(default=False)
    sales_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} (Seller: {self.seller.username})"

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['seller', 'created_at'], name='product_seller_created_idx'),
            models.Index(fields=['status', 'created_at'], name='product_status_created_idx'),
            models.Index(fields=['price'], name='product_price_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self.sku:
            self.sku = generate_sku()
        if self.stock == 0 and self.status == 'active':
            self.status = 'out_of_stock'
        elif self.stock > 0 and self.status == 'out_of_stock':
            self.status = 'active'
        super().save(*args, **kwargs)

    @property
    def is_available(self):
        return self.status == 'active' and self.stock > 0

    @property
    def low_stock(self):
        return 0 < self.stock <= 10

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock for a sale.

        Callers hold a ``select_for_update`` lock on the row and have already
        checked availability.
        """
        if quantity > self.stock:
            raise ValueError(f'Only {self.stock} unit(s) of {self.name} in stock.')
        self.stock -= quantity
        self.sales_count = F('sales_count') + quantity
        self.save(update_fields=['stock', 'sales_count', 'status', 'updated_at'])
        self.refresh_from_db(fields=['sales_count'])

    def restore_stock(self, quantity):
        """Put units of a cancelled order back on the shelf."""
        self.stock += quantity
        self.sales_count = F('sales_count') - quantity
        self.save(update_fields=['stock', 'sales_count', 'status', 'updated_at'])
        self.refresh_from_db(fields=['sales_count'])
