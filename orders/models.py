"""Database models for orders and order lines."""

import random
import time

from django.db import models
from django.conf import settings
from products.models import Product


def generate_order_number():
    return f"ORD-{int(time.time() * 1000)}-{random.randint(1000, 9999)}"


class Order(models.Model):
    """A buyer's purchase from a single seller.

    ``total_amount`` is computed from the line price snapshots at checkout
    and never recomputed from current product prices.
    """

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('processing', 'Processing'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
        ('refunded', 'Refunded'),
    )
    PAYMENT_STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    )
    PAYMENT_METHOD_CHOICES = (
        ('card', 'Card'),
        ('cash_on_delivery', 'Cash on delivery'),
        ('bank_transfer', 'Bank transfer'),
    )

    order_number = models.CharField(max_length=40, unique=True, default=generate_order_number, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='sales')

    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='card')
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    payment_reference = models.CharField(max_length=100, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    # Shipping address snapshot
    shipping_name = models.CharField(max_length=255)
    shipping_address = models.CharField(max_length=255)
    shipping_city = models.CharField(max_length=100)
    shipping_state = models.CharField(max_length=100)
    shipping_zip_code = models.CharField(max_length=20, blank=True, default='')
    shipping_country = models.CharField(max_length=100, default='Nigeria')
    shipping_phone = models.CharField(max_length=20)

    carrier = models.CharField(max_length=100, null=True, blank=True)
    tracking_number = models.CharField(max_length=120, null=True, blank=True)
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=500, blank=True, default='')
    buyer_notes = models.CharField(max_length=1000, blank=True, default='')

    funds_released = models.BooleanField(default=False)
    funds_released_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['buyer', 'created_at'], name='order_buyer_created_idx'),
            models.Index(fields=['seller', 'created_at'], name='order_seller_created_idx'),
            models.Index(fields=['status', 'created_at'], name='order_status_created_idx'),
            models.Index(fields=['status', 'funds_released', 'delivered_at'], name='order_escrow_due_idx'),
        ]

    def __str__(self):
        return f"{self.order_number} - {self.buyer.username}"

    @property
    def is_paid(self):
        return self.payment_status == 'completed'

    @property
    def item_count(self):
        return sum(line.quantity for line in self.lines.all())


class OrderLine(models.Model):
    """Line item inside an order, with the product name and price as sold."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='lines')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='order_lines')
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = "Order Item"
        verbose_name_plural = "Order Items"
        indexes = [
            models.Index(fields=['order', 'product'], name='orderline_order_product_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"

    @property
    def subtotal(self):
        return self.price * self.quantity
