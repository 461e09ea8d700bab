"""Cart APIs for authenticated buyers."""

from django.db import transaction
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError

from accounts.permissions import IsBuyer
from .models import ShoppingCart, ShoppingCartItem
from .serializers import ShoppingCartSerializer, ShoppingCartItemSerializer


def get_cart(user):
    cart, _ = ShoppingCart.objects.get_or_create(user=user)
    return cart


class CartViewSet(viewsets.GenericViewSet):
    """Cart API: a single cart per buyer, created on first access."""

    serializer_class = ShoppingCartSerializer
    permission_classes = [IsBuyer]

    def list(self, request, *args, **kwargs):
        """Return the buyer's cart (create if missing)."""
        cart = get_cart(request.user)
        return Response(self.get_serializer(cart).data)

    @action(detail=False, methods=['delete'], url_path='clear')
    def clear(self, request):
        cart = get_cart(request.user)
        cart.items.all().delete()
        return Response(self.get_serializer(cart).data)


class CartItemViewSet(mixins.CreateModelMixin,
                      mixins.UpdateModelMixin,
                      mixins.DestroyModelMixin,
                      mixins.ListModelMixin,
                      viewsets.GenericViewSet):
    """Cart item API for adding/updating/removing items from the cart."""

    serializer_class = ShoppingCartItemSerializer
    permission_classes = [IsBuyer]
    pagination_class = None

    def get_queryset(self):
        """Return cart items scoped to the current buyer."""
        return ShoppingCartItem.objects.filter(cart__user=self.request.user).select_related('product')

    def create(self, request, *args, **kwargs):
        """Add an item to the cart, merging quantity if it already exists."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = get_cart(request.user)
        product = serializer.validated_data['product']
        incoming_qty = serializer.validated_data.get('qty') or 1

        # Merge with existing line, but do not exceed available stock.
        with transaction.atomic():
            cart_item = ShoppingCartItem.objects.select_for_update().filter(cart=cart, product=product).first()
            if cart_item is None:
                cart_item = ShoppingCartItem(cart=cart, product=product, qty=incoming_qty)
            else:
                cart_item.qty += incoming_qty

            # Re-run stock validation against the final quantity.
            final_serializer = self.get_serializer(cart_item, data={'quantity': cart_item.qty}, partial=True)
            final_serializer.is_valid(raise_exception=True)
            final_serializer.save()

        return Response(self.get_serializer(cart_item).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update cart item quantity with stock validation."""
        if 'product' in request.data:
            raise ValidationError({'product': 'Changing the product of a cart item is not allowed.'})
        return super().update(request, *args, **kwargs)
