"""
Resolution Desk - Collaborative resolution drafting core

Committees split into blocs; delegates in a bloc co-author one resolution
while the committee chair supervises every bloc, locks and unlocks editing,
runs a shared countdown timer and leaves comments.

Core truths:
- The shared document store is the only source of truth
- Views change only through subscription callbacks, never optimistically
- Clause lists are append-only and numbered inside a transaction
- The countdown is derived from one persisted timestamp, never ticked
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
