from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsSupplier
from .models import Product
from .serializers import (
    ProductSerializer,
    ProductListSerializer,
    ProductCreateSerializer,
    ProductUpdateSerializer,
)
from .services import (
    create_product,
    update_product,
    deactivate_product,
    search_products,
    get_categories,
    ProductNotFoundError,
    DuplicateProductError,
    NotProductOwnerError,
)


class ProductPagination(PageNumberPagination):
    """Custom pagination for products."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the product catalog.

    list: Browse active products (with filters)
    create: Add a product (suppliers only)
    retrieve: Get a specific product
    partial_update: Update own product (suppliers only)
    destroy: Deactivate own product (suppliers only)
    """

    queryset = Product.objects.filter(is_active=True).select_related('supplier')
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = ProductPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """
        Filter products based on query parameters.

        Filters:
        - search: Search in name, description, supplier business name
        - category: Product category
        - supplier: Supplier ID
        - city: Supplier city
        - in_stock: Only products that can currently be ordered
        """
        params = self.request.query_params
        return search_products(
            search=params.get('search'),
            category=params.get('category'),
            supplier_id=params.get('supplier'),
            city=params.get('city'),
            in_stock=params.get('in_stock') in ('1', 'true', 'True'),
        )

    def get_permissions(self):
        """Only suppliers may change the catalog."""
        if self.action in ['create', 'partial_update', 'destroy', 'mine']:
            return [IsAuthenticated(), IsSupplier()]
        return [IsAuthenticatedOrReadOnly()]

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return ProductListSerializer
        elif self.action == 'create':
            return ProductCreateSerializer
        elif self.action == 'partial_update':
            return ProductUpdateSerializer
        return ProductSerializer

    def create(self, request, *args, **kwargs):
        """Create a new product."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = create_product(supplier=request.user, **serializer.validated_data)
        except DuplicateProductError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        """Update own product."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = update_product(
                product_id=kwargs['pk'],
                supplier=request.user,
                data=serializer.validated_data,
            )
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotProductOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateProductError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete own product."""
        try:
            deactivate_product(product_id=kwargs['pk'], supplier=request.user)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotProductOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Supplier's own products, including inactive ones."""
        products = search_products(supplier_id=request.user.id, only_active=False)
        serializer = ProductSerializer(products, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def categories(self, request):
        """Get list of all product categories."""
        return Response(get_categories())
