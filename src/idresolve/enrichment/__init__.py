"""Enrichment of resolved identities."""

from idresolve.enrichment.notable import NotableMemberService

__all__ = ["NotableMemberService"]
