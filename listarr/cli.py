"""
Command line interface for Listarr.

Sub-commands manage lists (lists, new, add, show, remove), sync a list into
Radarr or Sonarr (sync), and search or add single titles (search, add-movie,
add-series, meta).
"""

import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from .catalog import MovieCatalog, SeriesCatalog
from .config import __version__, build_settings, load_config
from .defaults import fetch_service_meta
from .display import (
    CYAN, RESET,
    format_candidate, format_outcome, log_error, print_status,
    setup_logging, summarize_outcomes,
)
from .errors import ListarrError
from .helpers import default_config_path
from .models import Target
from .notify import create_notifier
from .orchestrator import AddOrchestrator, movie_candidate, series_candidate
from .radarr import create_radarr_client
from .sonarr import create_sonarr_client
from .store import ListStore
from .sync import sync_list


def cmd_lists(args, settings, store: ListStore) -> int:
    names = store.list_names()
    if not names:
        print("No lists yet. Create one with: new <name>")
        return 0
    print("Lists: " + ', '.join(names))
    return 0


def cmd_new(args, settings, store: ListStore) -> int:
    store.create_list(args.name)
    print_status(f"List \"{args.name}\" created.", "success")
    return 0


def cmd_add(args, settings, store: ListStore) -> int:
    item = store.add_item(args.name, args.id_spec, added_by=args.added_by)
    print_status(f"Added {item.spec} to {args.name}", "success")
    return 0


def cmd_show(args, settings, store: ListStore) -> int:
    items = store.get_items(args.name)
    print(f"{CYAN}Items in {args.name}:{RESET}")
    if not items:
        print("(empty)")
    for i, item in enumerate(items, 1):
        print(f"{i}. {item.spec}")
    return 0


def cmd_remove(args, settings, store: ListStore) -> int:
    item = store.remove_item(args.name, args.index)
    label = item.spec if item else f"item {args.index}"
    print_status(f"Removed {label} from {args.name}", "success")
    return 0


def cmd_sync(args, settings, store: ListStore) -> int:
    target = Target.parse(args.target)
    orchestrator = AddOrchestrator.for_target(target, settings)

    def show(position, outcome):
        print(format_outcome(outcome, index=position))

    outcomes = sync_list(store, args.name, orchestrator, on_outcome=show)
    counts = summarize_outcomes(outcomes)
    summary = ', '.join(f"{count} {status}" for status, count in counts.items()) or 'nothing to do'
    print_status(f"Sync complete: {summary}", "success")
    if args.json:
        print(json.dumps([o.to_dict() for o in outcomes], indent=2))
    return 0


def _catalog_for(target: Target, settings):
    if target is Target.RADARR:
        return MovieCatalog.from_settings(create_radarr_client(settings, required=True), settings)
    return SeriesCatalog.from_settings(create_sonarr_client(settings, required=True), settings)


def cmd_search(args, settings, store: ListStore) -> int:
    target = Target.parse(args.target)
    catalog = _catalog_for(target, settings)
    records = catalog.lookup_by_term(' '.join(args.query))
    if args.json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0
    if not records:
        print("No results.")
    for i, record in enumerate(records, 1):
        print(format_candidate(record, index=i))
    return 0


def _print_direct_outcome(outcome, as_json: bool) -> int:
    if as_json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print(format_outcome(outcome))
    return 0 if outcome.status in ('added', 'exists') else 1


def cmd_add_movie(args, settings, store: ListStore) -> int:
    orchestrator = AddOrchestrator.for_target(Target.RADARR, settings, notifier=create_notifier(settings))
    candidate = movie_candidate(args.tmdb_id, title=args.title)
    if not candidate.title:
        # Radarr wants a title; fill it in from the catalog when we can
        found = orchestrator.catalog.lookup_by_external_id('tmdb', args.tmdb_id)
        if found:
            candidate = found
    orchestrator.monitored = not args.unmonitored
    outcome = orchestrator.add_candidate(candidate, root_folder_path=args.root,
                                         quality_profile_id=args.quality_profile)
    return _print_direct_outcome(outcome, args.json)


def cmd_add_series(args, settings, store: ListStore) -> int:
    orchestrator = AddOrchestrator.for_target(Target.SONARR, settings, notifier=create_notifier(settings))
    candidate = series_candidate(tvdb_id=args.tvdb_id, imdb_id=args.imdb_id, title=args.title)
    orchestrator.monitored = not args.unmonitored
    orchestrator.season_folder = not args.no_season_folder
    outcome = orchestrator.add_candidate(candidate, root_folder_path=args.root,
                                         quality_profile_id=args.quality_profile)
    return _print_direct_outcome(outcome, args.json)


def cmd_meta(args, settings, store: ListStore) -> int:
    target = Target.parse(args.target)
    if target is Target.RADARR:
        client = create_radarr_client(settings, required=True)
    else:
        client = create_sonarr_client(settings, required=True)
    print(json.dumps(fetch_service_meta(client), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='listarr',
        description='Curate watch-lists and sync them into Radarr and Sonarr'
    )
    parser.add_argument('--config', default=None, help='Path to config.yml (default: config/config.yml)')
    parser.add_argument('--data-file', default=None, help='Override the lists JSON file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    # Global options are also accepted after the sub-command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', default=argparse.SUPPRESS, help='Path to config.yml')
    common.add_argument('--data-file', default=argparse.SUPPRESS, help='Override the lists JSON file')
    common.add_argument('--debug', action='store_true', default=argparse.SUPPRESS,
                        help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('lists', parents=[common], help='Show all list names')
    p.set_defaults(func=cmd_lists)

    p = sub.add_parser('new', parents=[common], help='Create a list')
    p.add_argument('name')
    p.set_defaults(func=cmd_new)

    p = sub.add_parser('add', parents=[common], help='Append imdb:tt123 or tmdb:123 to a list')
    p.add_argument('name')
    p.add_argument('id_spec')
    p.add_argument('--added-by', default=None)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser('show', parents=[common], help='Show the items of a list')
    p.add_argument('name')
    p.set_defaults(func=cmd_show)

    p = sub.add_parser('remove', parents=[common], help='Remove the item at a 1-based position')
    p.add_argument('name')
    p.add_argument('index', type=int)
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser('sync', parents=[common], help='Add every item of a list to radarr or sonarr')
    p.add_argument('name')
    p.add_argument('target', help='radarr or sonarr')
    p.add_argument('--json', action='store_true', help='Also print outcomes as JSON')
    p.set_defaults(func=cmd_sync)

    p = sub.add_parser('search', parents=[common], help='Search the movie or series catalog')
    p.add_argument('target', help='radarr or sonarr')
    p.add_argument('query', nargs='+')
    p.add_argument('--json', action='store_true')
    p.set_defaults(func=cmd_search)

    p = sub.add_parser('add-movie', parents=[common], help='Add one movie to Radarr by TMDB id')
    p.add_argument('tmdb_id')
    p.add_argument('--title', default=None)
    p.add_argument('--root', default=None, help='Root folder override')
    p.add_argument('--quality-profile', type=int, default=None, help='Quality profile id override')
    p.add_argument('--unmonitored', action='store_true')
    p.add_argument('--json', action='store_true')
    p.set_defaults(func=cmd_add_movie)

    p = sub.add_parser('add-series', parents=[common], help='Add one series to Sonarr')
    p.add_argument('--tvdb-id', default=None)
    p.add_argument('--imdb-id', default=None)
    p.add_argument('--title', default=None)
    p.add_argument('--root', default=None, help='Root folder override')
    p.add_argument('--quality-profile', type=int, default=None, help='Quality profile id override')
    p.add_argument('--unmonitored', action='store_true')
    p.add_argument('--no-season-folder', action='store_true')
    p.add_argument('--json', action='store_true')
    p.set_defaults(func=cmd_add_series)

    p = sub.add_parser('meta', parents=[common], help='Show root folders and quality profiles of a service')
    p.add_argument('target', help='radarr or sonarr')
    p.set_defaults(func=cmd_meta)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    start_time = datetime.now()
    try:
        config = load_config(args.config or default_config_path())
        settings = build_settings(config)
    except ListarrError as e:
        log_error(f"Could not load configuration: {e}")
        return 1

    logger = setup_logging(debug=args.debug, config=config,
                           log_dir=settings.log_dir,
                           retention_days=settings.log_retention_days)
    logger.debug(f"Listarr v{__version__} running '{args.command}'")

    store = ListStore(args.data_file or settings.data_file)
    try:
        status = args.func(args, settings, store)
    except (ListarrError, ValueError) as e:
        log_error(str(e))
        return 1

    logger.debug(f"'{args.command}' finished in {(datetime.now() - start_time).total_seconds():.1f}s")
    return status


if __name__ == '__main__':
    sys.exit(main())
