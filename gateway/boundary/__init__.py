"""
Boundary layer for external system integrations.

Handles all interactions with external systems. Provides clients for the
NetSuite SuiteQL API.
"""
