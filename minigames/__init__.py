"""
Minigames - Orchestration core for minigames on a multiplayer game server.

Lets independently implemented minigames (races, deathmatches, collectable
hunts, reaction tests) be declared once and provides:
- A registry of declared games with unique identities and commands
- One player command per game, plus a catalogue for the rest
- Sessions with signup, player-count enforcement and cleanup
- Settings customization before a session starts
"""

__version__ = "0.1.0"
