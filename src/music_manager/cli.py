# src/music_manager/cli.py

"""Command line interface for the music collection.

Read commands (``album``, ``artist``) print ratings computed from the library
file. Write commands (``rate``, ``modifiers``, ``import``) update it.
``search`` queries MusicBrainz without touching the library.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from music_manager.config import get_library_path, get_log_level
from music_manager.domain.edits import (
    delete_track_rating,
    set_album_modifiers,
    set_track_rating,
)
from music_manager.domain.models import Album
from music_manager.io.library_jsonl import (
    Library,
    append_album,
    append_artist,
    load_library,
    save_library,
)
from music_manager.metadata.musicbrainz_client import (
    MusicBrainzError,
    build_search_query,
    fetch_release_album,
    search_release_groups,
)
from music_manager.transformers.albums import transform_albums_with_rating
from music_manager.transformers.artists import transform_artists_with_ratings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the music-manager CLI."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    _configure_logging(verbose=args.verbose)

    library_path = Path(args.library) if args.library else get_library_path()

    try:
        if args.command == "album":
            _cmd_album(library_path=library_path, album_id=args.id)
        elif args.command == "artist":
            _cmd_artist(library_path=library_path, artist_id=args.id)
        elif args.command == "rate":
            _cmd_rate(
                library_path=library_path,
                album_id=args.album,
                track_number=args.track,
                score=args.score,
                review=args.review,
                delete=args.delete,
            )
        elif args.command == "modifiers":
            _cmd_modifiers(
                library_path=library_path,
                album_id=args.album,
                cover=args.cover,
                production=args.production,
                mix=args.mix,
            )
        elif args.command == "import":
            _cmd_import(
                library_path=library_path,
                release_id=args.release_id,
                artist_ids=args.artist_id or None,
            )
        elif args.command == "search":
            _cmd_search(artist=args.artist, album=args.album, limit=args.limit)
        else:
            msg = f"Unknown command: {args.command}"
            raise ValueError(msg)
    except ValueError as exc:
        # exits with status 2 and the usage line
        parser.error(str(exc))
    except LookupError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except MusicBrainzError as exc:
        logger.error("%s (%s)", exc.user_message(), exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-manager",
        description="Rate albums and artists of a personal music collection.",
    )

    parser.add_argument(
        "--library",
        default=None,
        help=(
            "Path to the library JSONL file "
            "(default: $MUSIC_MANAGER_LIBRARY or data/library.jsonl)."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Sub-command to run.",
    )

    album_parser = subparsers.add_parser(
        "album",
        help="Show album ratings.",
    )
    album_parser.add_argument(
        "--id",
        default=None,
        help="Only show the album with this id.",
    )

    artist_parser = subparsers.add_parser(
        "artist",
        help="Show artist ratings aggregated over their albums.",
    )
    artist_parser.add_argument(
        "--id",
        default=None,
        help="Only show the artist with this id.",
    )

    rate_parser = subparsers.add_parser(
        "rate",
        help="Rate a track (0-10) or delete its rating.",
    )
    rate_parser.add_argument("--album", required=True, help="Album id.")
    rate_parser.add_argument(
        "--track",
        type=int,
        required=True,
        help="Track number (disc 2 track 3 is 203).",
    )
    score_group = rate_parser.add_mutually_exclusive_group(required=True)
    score_group.add_argument("--score", type=int, help="Score from 0 to 10.")
    score_group.add_argument(
        "--delete",
        action="store_true",
        help="Delete the track's rating instead.",
    )
    rate_parser.add_argument("--review", default=None, help="Optional review text.")

    modifiers_parser = subparsers.add_parser(
        "modifiers",
        help="Set the cover/production/mix quality modifiers (0-10) of an album.",
    )
    modifiers_parser.add_argument("--album", required=True, help="Album id.")
    for name in ("cover", "production", "mix"):
        modifiers_parser.add_argument(
            f"--{name}",
            type=int,
            required=True,
            help=f"{name.capitalize()} modifier from 0 to 10.",
        )

    import_parser = subparsers.add_parser(
        "import",
        help="Import a MusicBrainz release as an unrated album.",
    )
    import_parser.add_argument(
        "--release-id",
        required=True,
        help="MusicBrainz release MBID.",
    )
    import_parser.add_argument(
        "--artist-id",
        action="append",
        default=[],
        help=(
            "Library artist id to credit (repeatable). "
            "Defaults to the credited artists, added to the library if missing."
        ),
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search MusicBrainz release groups.",
    )
    search_parser.add_argument("--artist", default="", help="Artist name.")
    search_parser.add_argument("--album", default="", help="Album title.")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of results (default: %(default)s).",
    )

    return parser


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_log_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _cmd_album(*, library_path: Path, album_id: str | None) -> None:
    library = load_library(library_path)
    albums = library.albums
    if album_id is not None:
        albums = [a for a in albums if a.id == album_id]
        if not albums:
            logger.warning("No album with id %s in %s.", album_id, library_path)
            return

    for item in transform_albums_with_rating(albums):
        rank = int(item.rating.rank_value) if item.rating else "-"
        print(
            f"{item.album.id}\t{item.album.title}\t{rank}\t"
            f"{item.rank_label}\t{item.final_album_rating:.2f}"
        )


def _cmd_artist(*, library_path: Path, artist_id: str | None) -> None:
    library = load_library(library_path)
    artists = library.artists
    if artist_id is not None:
        artists = [a for a in artists if a.id == artist_id]
        if not artists:
            logger.warning("No artist with id %s in %s.", artist_id, library_path)
            return

    for item in transform_artists_with_ratings(artists, library.albums):
        print(
            f"{item.artist.id}\t{item.artist.name}\t{int(item.rank_value)}\t"
            f"{item.rank_label}\t{item.avg_rating}\t"
            f"{item.rated_album_count}/{item.album_count}"
        )


def _require_album(library: Library, album_id: str, library_path: Path) -> Album:
    album = library.find_album(album_id)
    if album is None:
        msg = f"No album with id {album_id} in {library_path}."
        raise LookupError(msg)
    return album


def _cmd_rate(
    *,
    library_path: Path,
    album_id: str,
    track_number: int,
    score: int | None,
    review: str | None,
    delete: bool,
) -> None:
    library = load_library(library_path)
    album = _require_album(library, album_id, library_path)

    if delete:
        if not delete_track_rating(album, track_number):
            logger.info(
                "Track %s of album %s has no rating. Nothing to delete.",
                track_number,
                album_id,
            )
            return
        logger.info("Deleted rating of track %s on %s.", track_number, album.title)
    else:
        assert score is not None
        set_track_rating(album, track_number, score, review)
        logger.info("Rated track %s on %s: %s.", track_number, album.title, score)

    save_library(library_path, library)


def _cmd_modifiers(
    *,
    library_path: Path,
    album_id: str,
    cover: int,
    production: int,
    mix: int,
) -> None:
    library = load_library(library_path)
    album = _require_album(library, album_id, library_path)

    set_album_modifiers(album, cover=cover, production=production, mix=mix)
    save_library(library_path, library)
    logger.info(
        "Set modifiers of %s: cover=%s production=%s mix=%s.",
        album.title,
        cover,
        production,
        mix,
    )


def _cmd_import(
    *,
    library_path: Path,
    release_id: str,
    artist_ids: list[str] | None,
) -> None:
    library = load_library(library_path)
    imported = fetch_release_album(release_id)
    album = imported.album

    if library.find_album(album.id) is not None:
        logger.info("Album %s already in %s. Skipping.", album.id, library_path)
        return

    if artist_ids is not None:
        album.artist_ids = artist_ids
    else:
        # get-or-create each credited artist
        resolved: list[str] = []
        for credited in imported.artists:
            artist = library.find_artist(mbid=credited.mbid, name=credited.name)
            if artist is None:
                artist = credited
                library.artists.append(artist)
                append_artist(library_path, artist)
                logger.info("Added artist %s (%s).", artist.name, artist.id)
            resolved.append(artist.id)
        album.artist_ids = resolved

    append_album(library_path, album)
    logger.info(
        "Imported %s (%d tracks) into %s.",
        album.title,
        len(album.tracks),
        library_path,
    )


def _cmd_search(*, artist: str, album: str, limit: int) -> None:
    query = build_search_query(artist, album)
    if not query:
        msg = "Provide --artist and/or --album."
        raise ValueError(msg)

    for group in search_release_groups(query, limit=limit):
        credits = "".join(
            c.get("name", "") + c.get("joinphrase", "")
            for c in group.get("artist-credit", [])
        )
        print(
            f"{group.get('id')}\t{credits}\t{group.get('title')}\t"
            f"{group.get('primary-type', '')}\t{group.get('first-release-date', '')}"
        )


if __name__ == "__main__":
    # python -m music_manager.cli --library data/library.jsonl artist
    main()
