"""
mixins.py
─────────────────────────────────────────────────────────────────────
Permisos por rol (Profile.role)
"""

from django.contrib.auth.mixins import AccessMixin
from django.core.exceptions import ObjectDoesNotExist
from django.http import JsonResponse


def user_role(user):
    """Rol explícito del perfil vinculado; None si el usuario no tiene perfil."""
    try:
        return user.profile.role
    except ObjectDoesNotExist:
        return None


class RoleRequiredMixin(AccessMixin):
    """
    El usuario tiene que tener uno de los roles de allowed_roles.

    class MyView(RoleRequiredMixin, View):
        allowed_roles = ["admin", "dt"]
    """
    allowed_roles: list[str] = []

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Autenticación requerida."}, status=401)

        if request.user.is_superuser or not self.allowed_roles:
            return super().dispatch(request, *args, **kwargs)

        if user_role(request.user) not in self.allowed_roles:
            return JsonResponse({"error": "No tenés permiso para esta acción."}, status=403)

        return super().dispatch(request, *args, **kwargs)


class TreasuryAdminMixin(RoleRequiredMixin):
    """Solo administradores."""
    allowed_roles = ["admin"]


class PardonMixin(RoleRequiredMixin):
    """Administradores o el DT."""
    allowed_roles = ["admin", "dt"]
