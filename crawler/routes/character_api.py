"""
project: Dungeon Crawler
module: character_api.py
License: MIT

Minimal character endpoints: create a character and read its position.

Stats, inventory and the village are owned elsewhere; the dungeon engine only
needs a character row to attach levels and a position to.
"""

from flask import Blueprint, jsonify

from crawler import db
from crawler.errors import NotFoundError, ValidationError
from crawler.models import CHARACTER_CLASSES, RACES, Character
from crawler.routes.request_helpers import json_body

bp_character = Blueprint("character", __name__, url_prefix="/api/characters")

MAX_NAME_LENGTH = 80


def _choice(value, allowed, field, default):
    if value is None:
        return default
    if not isinstance(value, str) or value.strip().upper() not in allowed:
        raise ValidationError(f"Invalid {field}", **{field: value, "allowed": ", ".join(allowed)})
    return value.strip().upper()


@bp_character.route("", methods=["POST"])
def create_character():
    """Create a character.

    Body JSON: { "name": str, "race": str?, "class": str? }
    Response (201): { "character": {...} }
    """
    payload = json_body()
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Character name is required")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Character name must be at most {MAX_NAME_LENGTH} characters")
    race = _choice(payload.get("race"), RACES, "race", "HUMAN")
    char_class = _choice(payload.get("class"), CHARACTER_CLASSES, "class", "WARRIOR")
    character = Character(name=name, race=race, character_class=char_class)
    db.session.add(character)
    db.session.commit()
    return jsonify({"character": character.to_dict()}), 201


@bp_character.route("/<int:character_id>", methods=["GET"])
def get_character(character_id: int):
    character = db.session.get(Character, character_id)
    if character is None:
        raise NotFoundError("Character not found", character_id=character_id)
    return jsonify({"character": character.to_dict()})
