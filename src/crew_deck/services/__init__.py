"""Service layer for the Crew Deck application.

Each public service function runs as one transaction: it either commits all
of its changes or raises a ``crew_deck.core.errors.StationError`` subclass
after rolling back.
"""
