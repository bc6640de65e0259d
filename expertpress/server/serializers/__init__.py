"""Output serializers applied to API responses."""

from . import experts, post_gating

__all__ = ["experts", "post_gating"]
