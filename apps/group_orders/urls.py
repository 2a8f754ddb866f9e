from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'group_orders'

router = DefaultRouter()
router.register(r'', views.GroupOrderViewSet, basename='group-order')

urlpatterns = [
    # GET    /api/group-orders/                          - List group orders
    # POST   /api/group-orders/                          - Open group order (supplier)
    # GET    /api/group-orders/{id}/                     - Group order details
    # POST   /api/group-orders/{id}/join/                - Join (vendor)
    # POST   /api/group-orders/{id}/update_quantity/     - Change committed quantity (vendor)
    # POST   /api/group-orders/{id}/leave/               - Withdraw (vendor)
    # POST   /api/group-orders/{id}/cancel/              - Cancel (owning supplier)
    # GET    /api/group-orders/{id}/participants/        - Active participants
    # GET    /api/group-orders/{id}/settlement/          - Settled prices
    path('', include(router.urls)),
]
