"""
Application layer - Use cases and orchestration for Resolution Desk.

This layer contains:
- Port definitions (document store, identity provider, clock, view listener)
- Application services (mutation engine, timer, subscriptions, session)
- DTOs describing derived view state

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, bootstrap
"""
