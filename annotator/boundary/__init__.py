"""
Boundary layer for external system integrations.

Handles all interactions with external systems (object storage).
Provides adapters and clients for infrastructure dependencies.
"""
