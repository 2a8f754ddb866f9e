from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'', views.ProductViewSet, basename='product')

urlpatterns = [
    # GET    /api/products/                - Browse products
    # POST   /api/products/                - Create product (supplier)
    # GET    /api/products/{id}/           - Product details
    # PATCH  /api/products/{id}/           - Update product (owner)
    # DELETE /api/products/{id}/           - Deactivate product (owner)
    # GET    /api/products/mine/           - Supplier's own products
    # GET    /api/products/categories/     - Category choices
    path('', include(router.urls)),
]
