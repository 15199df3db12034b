"""Request context and data access for Account Gateway backed APIs."""

from cloudobjects.parsing.aauid import AAUIDParser

from .context import AccountContext
from .loader import DataLoader

__all__ = ["AAUIDParser", "AccountContext", "DataLoader"]
