"""Products API views.

Includes CRUD for products and read-only access to categories.
Filtering/search/ordering/pagination are provided for list endpoints.
"""

from rest_framework import viewsets, filters, status
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from django_filters.rest_framework import DjangoFilterBackend

from accounts.permissions import IsProductOwner, IsSeller
from .models import Product, ProductCategory
from .serializers import ProductSerializer, ProductCategorySerializer, ProductStatusSerializer
from .permissions import IsSellerOrReadOnly


class StandardResultsSetPagination(PageNumberPagination):
    """Default pagination used by most API endpoints."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProductViewSet(viewsets.ModelViewSet):
    """Products CRUD.

    - Public users and buyers: read active products only.
    - Sellers: CRUD only their own products (any status).
    """

    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination

    # دمج الفلاتر والبحث والترتيب
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'seller', 'status', 'featured']
    search_fields = ['name', 'description', 'brand']
    ordering_fields = ['name', 'price', 'created_at', 'sales_count']

    permission_classes = [IsSellerOrReadOnly]

    def get_queryset(self):
        user = self.request.user
        qs = Product.objects.select_related('category', 'seller')
        if user.is_authenticated and getattr(user, 'user_type', None) == 'seller':
            return qs.filter(seller=user)
        return qs.filter(status='active')

    def perform_create(self, serializer):
        # ربط المنتج بالبائع اللي عامل login حالياً تلقائياً
        serializer.save(seller=self.request.user)

    @action(detail=True, methods=['patch'], url_path='status', permission_classes=[IsSeller, IsProductOwner])
    def set_status(self, request, pk=None):
        """Seller-only: publish, unpublish or draft a product, optionally restocking it."""
        product = self.get_object()
        serializer = ProductStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if 'stock' in serializer.validated_data:
            product.stock = serializer.validated_data['stock']
        product.status = serializer.validated_data['status']
        if product.status == 'active' and product.stock == 0:
            return Response({'detail': 'Cannot activate a product with no stock.'}, status=status.HTTP_400_BAD_REQUEST)
        product.save()
        return Response(self.get_serializer(product).data)


class ProductCategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only product categories."""
    queryset = ProductCategory.objects.order_by('category_name')
    serializer_class = ProductCategorySerializer
    permission_classes = []
    pagination_class = None
