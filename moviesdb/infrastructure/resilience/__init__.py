"""API Resilience Implementations.

Contains the backoff policy, the sliding-window rate-limit budget, the system
clock and the retry service that ties them to the transport.
Bounded Context: API Resilience
"""
