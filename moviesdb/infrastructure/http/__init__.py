"""HTTP adapters: the httpx-based transport and the response envelope validator.
Bounded Context: Wire Protocol
"""
