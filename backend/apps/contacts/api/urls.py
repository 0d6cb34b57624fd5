from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import CreditorViewSet, DebtorViewSet

# Create router and register ViewSets
router = DefaultRouter()
router.register(r'creditors', CreditorViewSet, basename='creditor')
router.register(r'debtors', DebtorViewSet, basename='debtor')

# URL patterns
urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/contacts/creditors/ - GET (list), POST (create)
    # /api/v1/contacts/creditors/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/contacts/creditors/{id}/statement/ - GET (purchases, bills, payments and balance)

    # /api/v1/contacts/debtors/ - GET (list), POST (create)
    # /api/v1/contacts/debtors/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/contacts/debtors/{id}/statement/ - GET (invoices, receipts and balance)
]
