"""Library domain - tracks the AutoDJ can choose from."""

from .models import Track

__all__ = ["Track"]
