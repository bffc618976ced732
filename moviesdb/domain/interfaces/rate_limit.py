"""Interface for a shared rate-limit budget.

A budget may be shared by several client instances (or not at all). The
client asks for permission before every attempt.
"""

import abc


class RateLimitBudget(abc.ABC):
    """Abstract Base Class for request budgets."""

    @abc.abstractmethod
    async def reserve(self, cost: int = 1) -> float:
        """Tries to reserve `cost` units of the budget.

        Args:
            cost: Number of request units to consume.

        Returns:
            0.0 if the reservation was granted, otherwise a positive wait hint
            in seconds after which the caller should try again. Nothing is
            consumed when a wait hint is returned.
        """
        pass
