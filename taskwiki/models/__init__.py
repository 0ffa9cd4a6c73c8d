from taskwiki.models.models import Page

__all__ = ["Page"]
