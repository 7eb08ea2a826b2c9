"""Domain layer for finstate application.

Services and builders are imported from their modules directly
(e.g. ``finstate.domain.generator``); this package does not re-export them
so that ``finstate.database`` can import ``finstate.domain.entities``
without a cycle.
"""
