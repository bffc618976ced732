"""Domain Event definitions.

Represents significant occurrences during a call (retries, deferrals,
completion) that an external observer may react to.
"""
