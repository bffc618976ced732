"""Domain Layer: value objects, endpoint catalog, errors, events and ports.

Nothing in here performs I/O.
"""
