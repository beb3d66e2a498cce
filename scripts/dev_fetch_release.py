#!/usr/bin/env python3
"""Manual script to test MusicBrainz release import."""

from music_manager.metadata.musicbrainz_client import fetch_release_album
from music_manager.rating.album import compute_album_rating

if __name__ == "__main__":
    imported = fetch_release_album("b84ee12a-09ef-421b-82de-0441a926375b")
    album = imported.album
    print(album.title, len(album.tracks))
    print([artist.name for artist in imported.artists])
    print(compute_album_rating(album.tracks, album.modifiers))
