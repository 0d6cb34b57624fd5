from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import BankAccountViewSet, BankTransactionViewSet, BankReconciliationViewSet

# Create router and register ViewSets
router = DefaultRouter()
router.register(r'accounts', BankAccountViewSet, basename='bankaccount')
router.register(r'transactions', BankTransactionViewSet, basename='banktransaction')
router.register(r'reconciliations', BankReconciliationViewSet, basename='bankreconciliation')

# URL patterns
urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/bank-accounts/accounts/ - GET (list), POST (create)
    # /api/v1/bank-accounts/accounts/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/bank-accounts/accounts/{id}/transactions/ - GET (account transactions)
    # /api/v1/bank-accounts/accounts/{id}/reconciliation/ - GET (worksheet, ?statement_balance=)
    # /api/v1/bank-accounts/accounts/{id}/reconcile/ - POST (save reconciliation)
    # /api/v1/bank-accounts/accounts/{id}/recalculate/ - POST (rebuild current balance)

    # /api/v1/bank-accounts/transactions/ - GET (list), POST (create)
    # /api/v1/bank-accounts/transactions/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
    # /api/v1/bank-accounts/transactions/{id}/reconcile/ - POST (mark reconciled)
    # /api/v1/bank-accounts/transactions/{id}/unreconcile/ - POST (clear reconciled flag)

    # /api/v1/bank-accounts/reconciliations/ - GET (history)
]
