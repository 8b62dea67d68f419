"""Domain exceptions raised by the corporate action engine."""


class CorporateActionError(Exception):
    """Base exception for corporate action processing."""

    pass


class InvalidCorporateActionError(CorporateActionError):
    """The submitted action cannot be applied (bad ratio, zero shares, duplicate)."""

    pass


class ConcurrentLotUpdateError(CorporateActionError):
    """A lot changed underneath the transaction that was adjusting it."""

    pass


class CorporateActionPersistenceError(CorporateActionError):
    """The datastore rejected the transaction; nothing was written."""

    pass
