from django.urls import path
from .views import DashboardAPIView

urlpatterns = [
    path('', DashboardAPIView.as_view(), name='dashboard-api'),

    # Available endpoints:
    # /api/v1/dashboard/ - GET (income, expenses, outstanding totals, bank balance, counts, recent activity)
]
