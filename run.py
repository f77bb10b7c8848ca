"""Dungeon Crawler CLI entry point.

Provides subcommands for running the HTTP server, creating the database
schema and previewing a generated maze in the terminal. Accepts configuration
via flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from pathlib import Path
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

ROOT_DIR = Path(__file__).resolve().parent


def _load_version() -> str:
    try:
        return (ROOT_DIR / "VERSION").read_text(encoding="utf-8").strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Dungeon Crawler Game Server

    Run the JSON API server, create the database schema, or preview a generated
    maze. Configuration can be provided via CLI flags or environment variables.
    If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST            Bind address for the web server (default: 0.0.0.0)
          PORT            Port for the web server (default: 5000)
          DATABASE_URL    SQLAlchemy database URI (default: sqlite:///instance/crawler.db)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only and use a different database
          python run.py server --host 127.0.0.1 --db sqlite:///instance/dev.db

          # Load variables from .env then create the schema
          python run.py --env-file .env init-db

          # Print a 10x6 level-3 maze for seed 42
          python run.py generate-preview --width 10 --height 6 --level 3 --seed 42
        """
    )

    parser = argparse.ArgumentParser(
        prog="crawler",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Dungeon Crawler Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP API server",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/crawler.db)",
    )
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    init_parser = subparsers.add_parser("init-db", help="Create database tables and exit")
    init_parser.add_argument("--db", dest="db_uri", default=None, help="Database URI to initialise")
    init_parser.set_defaults(command="init-db")

    preview_parser = subparsers.add_parser(
        "generate-preview",
        help="Print an ASCII rendering of a generated maze",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Carve and classify a maze without touching the database.",
    )
    preview_parser.add_argument("--width", type=int, default=None, help="Grid width (default: env DUNGEON_WIDTH or 20)")
    preview_parser.add_argument(
        "--height", type=int, default=None, help="Grid height (default: env DUNGEON_HEIGHT or 20)"
    )
    preview_parser.add_argument("--level", type=int, default=1, help="Level depth, also the difficulty (default: 1)")
    preview_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    preview_parser.add_argument("--metrics", action="store_true", help="Also print generation metrics")
    preview_parser.set_defaults(command="generate-preview")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def _banner(mode: str, host, port, db_banner: str) -> str:
    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Dungeon Crawler Bootup{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "Dungeon Crawler Bootup"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Database:'):12} {value(db_banner)}",
        divider,
        "",
    ]
    return "\n".join(lines)


def _preview(args) -> int:
    from crawler.errors import CrawlerError
    from crawler.maze import generate_maze
    from crawler.services.seeds import coerce_seed

    width = args.width or int(os.getenv("DUNGEON_WIDTH", "20"))
    height = args.height or int(os.getenv("DUNGEON_HEIGHT", "20"))
    try:
        maze = generate_maze(width, height, args.level, seed=coerce_seed(args.seed), enable_metrics=args.metrics)
    except CrawlerError as exc:
        print(f"[ERROR] {exc.message}")
        return 1
    print(f"Level {args.level}  {width}x{height}  seed={maze.seed}")
    print(maze.render_ascii())
    if args.metrics:
        for key in ("cells", "passages", "dead_ends", "corridors", "junctions", "reachable", "perfect"):
            print(f"  {key}: {maze.metrics[key]}")
        for room_type, count in maze.metrics["room_types"].items():
            print(f"  {room_type.lower()}: {count}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested (no error if the default file is missing)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "generate-preview":
        return _preview(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    db_uri_cli = getattr(args, "db_uri", None)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli
    db_banner = db_uri_cli or os.getenv("DATABASE_URL") or "auto (instance/crawler.db)"

    # Import server entrypoints only after environment is ready
    from crawler.logging_utils import log
    from crawler.server import init_db, start_server

    if mode == "init-db":
        init_db()
        print(f"[INFO] Database initialised: {db_banner}")
        return 0

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    print(_banner(mode, host, port, db_banner))
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)
    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


def cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
