from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import InvoiceViewSet, BillViewSet

# Create router and register ViewSets
router = DefaultRouter()
router.register(r'invoices', InvoiceViewSet, basename='invoice')
router.register(r'bills', BillViewSet, basename='bill')

# URL patterns
urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/invoices/ - GET (list), POST (create with items)
    # /api/v1/invoices/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/invoices/{id}/mark-paid/ - POST (mark as paid)
    # /api/v1/invoices/{id}/cancel/ - POST (cancel)

    # /api/v1/bills/ - GET (list), POST (create with items)
    # /api/v1/bills/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/bills/{id}/mark-paid/ - POST (mark as paid)
    # /api/v1/bills/{id}/cancel/ - POST (cancel)
]
