"""
Acolyte - rule-effect engine for a d100 tabletop RPG system.

Content items (talents, conditions, weapon qualities, cybernetics, origins)
declare their effects as small "rule elements". Once per data-preparation
pass an actor collects every rule element it owns into a Synthetics registry,
and the game-math consumers resolve modifiers out of it by domain.
"""

__version__ = "0.4.0"
