from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import PaymentViewSet, ReceiptViewSet

# Create router and register ViewSets
router = DefaultRouter()
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'receipts', ReceiptViewSet, basename='receipt')

# URL patterns
urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/payments/ - GET (list), POST (create; create_bank_transaction defaults to true)
    # /api/v1/payments/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/payments/open-bills/?creditor={id} - GET (bills that can still be paid)

    # /api/v1/receipts/ - GET (list), POST (create; create_bank_transaction defaults to true)
    # /api/v1/receipts/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/receipts/open-invoices/?debtor={id} - GET (invoices that can still be settled)
]
