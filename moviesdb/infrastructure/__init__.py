"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the client to the outside world (HTTP, environment, console, logging)
by implementing the interfaces defined in the domain layer. Also includes the
resilience services (backoff, rate limiting, retries).
"""
