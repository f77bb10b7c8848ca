"""
project: Dungeon Crawler
module: main.py
License: MIT

Core application routes: service health and version.
"""

from flask import Blueprint, jsonify

bp_main = Blueprint("main", __name__)


@bp_main.route("/health")
def health():
    from crawler import __version__

    return jsonify({"status": "ok", "version": __version__})
