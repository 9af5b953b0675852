"""Registry API."""

from web.api.registry.views import list_legislators, set_legislator_active

__all__ = ["list_legislators", "set_legislator_active"]
