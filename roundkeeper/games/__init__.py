"""
Games module - Game-specific data for the tracker.

Each game has its own subpackage with:
- Faction or seat catalog
- Default round count
- Setup helpers producing the initial roster actions
"""
