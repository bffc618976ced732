"""Core Application Layer: the public client facade and its services.

Connects the endpoint catalog with the infrastructure (transport, retries)
through the domain interfaces.
"""
