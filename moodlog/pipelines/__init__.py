"""
Pipeline functions.

Stateless orchestration between routers and services.
"""
