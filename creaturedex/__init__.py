"""Creature catalogue browsing service built on top of PokeAPI."""
