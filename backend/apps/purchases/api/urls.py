from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import PurchaseViewSet

router = DefaultRouter()
router.register(r'', PurchaseViewSet, basename='purchase')

urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/purchases/ - GET (list with totals), POST (create)
    # /api/v1/purchases/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
]
