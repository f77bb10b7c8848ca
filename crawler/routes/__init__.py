"""HTTP blueprints: health, characters and dungeon navigation."""
