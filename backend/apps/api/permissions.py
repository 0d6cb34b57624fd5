from rest_framework import permissions


class IsBusinessOwner(permissions.BasePermission):
    """
    Object-level permission for business-owned records.
    Allows access when the record (or the record itself, for Business)
    belongs to a business owned by the requesting user.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if hasattr(obj, 'owner_id'):
            return obj.owner_id == request.user.id

        business = getattr(obj, 'business', None)
        if business is None:
            return False
        return business.owner_id == request.user.id
