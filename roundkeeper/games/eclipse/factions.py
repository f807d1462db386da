"""
Eclipse faction catalog.

Each faction has a stable ID, display name, color and icon path.
Player.faction_id references Faction.id.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Faction:
    id: str
    name: str
    color: str  # Hex color
    icon: str


FACTIONS: list[Faction] = [
    # Alien species
    Faction("red-alien", "Eridani Empire", "#C62730", "/icons/eridani.svg"),
    Faction("blue-alien", "Hydran Progress", "#477B9F", "/icons/hydran.svg"),
    Faction("green-alien", "Planta", "#3F5D2B", "/icons/planta.svg"),
    Faction("yellow-alien", "Descendants of Draco", "#F9C300", "/icons/draco.svg"),
    Faction("white-alien", "Mechanema", "#C0C6CB", "/icons/mech.svg"),
    Faction("black-alien", "Orion", "#3D3D3D", "/icons/orion.svg"),
    # Terran factions
    Faction("red-human", "Terran Directorate", "#C62730", "/icons/terran.svg"),
    Faction("blue-human", "Terran Federation", "#477B9F", "/icons/terran.svg"),
    Faction("green-human", "Terran Union", "#3F5D2B", "/icons/terran.svg"),
    Faction("yellow-human", "Terran Republic", "#F9C300", "/icons/terran.svg"),
    Faction("white-human", "Terran Conglomerate", "#C0C6CB", "/icons/terran.svg"),
    Faction("black-human", "Terran Alliance", "#3D3D3D", "/icons/terran.svg"),
    # Expansion species
    Faction("brown-alien", "Rho Indi Syndicate", "#BE6C16", "/icons/rho_indi.svg"),
    Faction("pink-alien", "Wardens of Magellan", "#F65EB0", "/icons/magellan.svg"),
    Faction("white-alien-2", "The Exiles", "#D3D5D7", "/icons/exiles.svg"),
    Faction("orange-alien", "The Enlightened of Lyra", "#F2802C", "/icons/lyra.svg"),
]

_FACTIONS_BY_ID: dict[str, Faction] = {f.id: f for f in FACTIONS}


def get_faction(faction_id: str) -> Faction | None:
    """Look up a faction by ID."""
    return _FACTIONS_BY_ID.get(faction_id)
