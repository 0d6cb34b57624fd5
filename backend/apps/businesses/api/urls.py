from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import BusinessViewSet

# Create router and register ViewSets
router = DefaultRouter()
router.register(r'', BusinessViewSet, basename='business')

# URL patterns
urlpatterns = [
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/businesses/ - GET (list), POST (create)
    # /api/v1/businesses/{id}/ - GET (detail), PUT (update), PATCH (partial_update), DELETE (delete)
]
