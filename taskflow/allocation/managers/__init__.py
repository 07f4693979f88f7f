"""Data access managers for the allocation service.

``allocations`` holds the keyed store operations; ``quota`` composes them
with the catalog and the allocation policy; ``skips`` records agent
away periods.  Managers accept
``AsyncSession`` as a parameter and raise domain exceptions (``LookupError``,
``ValueError``, ``RuntimeError`` subclasses), never HTTP exceptions -- that
translation is the router's responsibility.
"""
