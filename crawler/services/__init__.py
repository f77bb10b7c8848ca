"""Dungeon services: persistence boundary, navigation, seeds and locks."""
