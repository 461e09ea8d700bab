"""Database models for buyer shopping carts."""

from django.db import models
from django.conf import settings
from products.models import Product


class ShoppingCart(models.Model):
    """Shopping cart of an authenticated buyer (one per user)."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='cart')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart of {self.user.username}"

    @property
    def total_price(self):
        return sum((item.subtotal for item in self.items.select_related('product')), 0)


class ShoppingCartItem(models.Model):
    """Line item inside a shopping cart."""

    cart = models.ForeignKey(ShoppingCart, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='cart_items')
    qty = models.PositiveIntegerField(default=1)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['cart', 'product'], name='unique_product_per_cart'),
        ]

    def __str__(self):
        return f"{self.qty} x {self.product.name}"

    @property
    def subtotal(self):
        return self.product.price * self.qty
