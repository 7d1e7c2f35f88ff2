"""Rating-system domain modules."""

from domain.ratings.protocol import Scope

__all__ = ["Scope"]
