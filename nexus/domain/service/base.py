"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the rules that span the invite and issuer records
    and own the transaction boundaries around them.
    """

    pass
