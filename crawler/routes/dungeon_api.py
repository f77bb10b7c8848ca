"""
project: Dungeon Crawler
module: dungeon_api.py
License: MIT

Dungeon generation and navigation API.

All character-bound routes take ``characterId`` (JSON body, or query string for
GET) and require the ``<dungeon_id>`` in the path to be the character's current
dungeon. Failures are raised as ``CrawlerError`` subclasses and rendered by the
app-level error handler.
"""

from flask import Blueprint, jsonify, request

from crawler.routes.request_helpers import character_id_from, int_field, json_body
from crawler.services.navigation import navigator
from crawler.services.seeds import coerce_seed

bp_dungeon = Blueprint("dungeon", __name__, url_prefix="/api/dungeons")


def _dungeon_payload(dungeon):
    data = dungeon.to_dict()
    data["rooms"] = [room.to_dict() for room in navigator.store.list_cells(dungeon.id)]
    return data


def _result_payload(result, with_rooms: bool = False):
    payload = result.to_dict()
    if with_rooms:
        payload["dungeon"] = _dungeon_payload(result.dungeon)
    return payload


@bp_dungeon.route("/generate", methods=["POST"])
def generate_dungeon():
    """Generate a new level and place the character at its entrance.

    Body JSON: { "characterId": int, "width"?: int, "height"?: int, "level"?: int,
                 "name"?: str, "seed"?: int|str }
    Response (201): { "dungeon": {..., "rooms": [...]}, "room": {...}, "character": {...}, "message": str }
    """
    payload = json_body()
    character_id = character_id_from(payload)
    result = navigator.generate(
        character_id,
        width=int_field(payload.get("width"), "width", required=False),
        height=int_field(payload.get("height"), "height", required=False),
        level=int_field(payload.get("level"), "level", required=False),
        name=payload.get("name"),
        seed=coerce_seed(payload.get("seed")),
    )
    return jsonify(_result_payload(result, with_rooms=True)), 201


@bp_dungeon.route("/<int:dungeon_id>", methods=["GET"])
def get_dungeon(dungeon_id: int):
    dungeon = navigator.store.get_dungeon(dungeon_id)
    return jsonify({"dungeon": _dungeon_payload(dungeon)})


@bp_dungeon.route("/<int:dungeon_id>/move", methods=["POST"])
def move(dungeon_id: int):
    payload = json_body()
    character_id = character_id_from(payload)
    x = int_field(payload.get("x"), "x")
    y = int_field(payload.get("y"), "y")
    result = navigator.move(character_id, x, y, dungeon_id=dungeon_id)
    return jsonify(_result_payload(result))


@bp_dungeon.route("/<int:dungeon_id>/current-room", methods=["GET"])
def current_room(dungeon_id: int):
    character_id = character_id_from(request.args)
    result = navigator.current_room(character_id, dungeon_id=dungeon_id)
    return jsonify(_result_payload(result))


@bp_dungeon.route("/<int:dungeon_id>/descend", methods=["POST"])
def descend(dungeon_id: int):
    character_id = character_id_from(json_body())
    result = navigator.descend(character_id, dungeon_id=dungeon_id)
    return jsonify(_result_payload(result, with_rooms=True))


@bp_dungeon.route("/<int:dungeon_id>/ascend", methods=["POST"])
def ascend(dungeon_id: int):
    character_id = character_id_from(json_body())
    result = navigator.ascend(character_id, dungeon_id=dungeon_id)
    return jsonify(_result_payload(result, with_rooms=True))
