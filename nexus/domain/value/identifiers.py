"""Strongly typed identifiers for invite engine entities.

Issuer and account identifiers are opaque strings handed over by the
authentication collaborator; NewType keeps them from being mixed up.
"""

from typing import NewType

IssuerId = NewType("IssuerId", str)
AccountId = NewType("AccountId", str)
