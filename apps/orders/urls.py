from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/orders/                       - List my orders
    # POST   /api/orders/                       - Place order (vendor)
    # GET    /api/orders/{id}/                  - Order details
    # POST   /api/orders/{id}/update_status/    - Change status
    path('', include(router.urls)),
]
