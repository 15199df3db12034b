"""Cache key builders for consistent key formatting."""

from cloudobjects.core.iri import IRI


class CacheKeys:
    """Cache key builders for consistent key formatting."""

    PREFIX = "clobj:"
    ACCOUNT_DATA_PREFIX = "accdata:"
    ATTACHMENT_SEPARATOR = "#"

    @classmethod
    def object(cls, coid: IRI | str, prefix: str | None = None) -> str:
        """Key for an object description."""
        return f"{cls.PREFIX if prefix is None else prefix}{coid}"

    @classmethod
    def attachment(
        cls,
        object_id: IRI | str,
        filename: str,
        prefix: str | None = None,
    ) -> str:
        """Key for an attachment of an object."""
        return cls.object(f"{object_id}{cls.ATTACHMENT_SEPARATOR}{filename}", prefix)

    @classmethod
    def account_data(cls, aauid: IRI | str, prefix: str | None = None) -> str:
        """Key for the account graph of an account."""
        return f"{cls.ACCOUNT_DATA_PREFIX if prefix is None else prefix}{aauid}"
