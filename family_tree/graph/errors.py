"""Exceptions raised by the family tree graph layer."""


class FamilyTreeError(Exception):
    """Base class for family tree errors."""


class StoreError(FamilyTreeError):
    """The graph store could not be reached or rejected a query."""


class CreationError(FamilyTreeError):
    """Creating an entity produced nothing in the store."""
