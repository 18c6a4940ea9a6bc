#!/usr/bin/env python3
"""
Song Reference Shortening

Known song links are stored on the wire as a one-letter host prefix plus the
track or video identifier:

    https://open.spotify.com/track/<id>?si=...   ->  s:<id>
    https://www.youtube.com/watch?v=<id>&t=...    ->  y:<id>
    https://youtu.be/<id>?si=...                  ->  y:<id>

Anything else passes through unchanged. Expansion always produces the
canonical URL, so query parameters after the identifier do not survive.
"""

SPOTIFY_MARKER = "open.spotify.com/track/"
YOUTUBE_MARKER = "youtube.com/watch?v="
YOUTU_BE_MARKER = "youtu.be/"

SPOTIFY_PREFIX = "s:"
YOUTUBE_PREFIX = "y:"

SPOTIFY_TRACK_URL = "https://open.spotify.com/track/"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


def shorten_url(url: str) -> str:
    """Shorten a recognized song URL; return other input unchanged."""
    if SPOTIFY_MARKER in url:
        track_id = url.split("/track/", 1)[1].split("?", 1)[0]
        return f"{SPOTIFY_PREFIX}{track_id}" if track_id else url

    if YOUTUBE_MARKER in url:
        video_id = url.split("v=", 1)[1].split("&", 1)[0]
        return f"{YOUTUBE_PREFIX}{video_id}" if video_id else url

    if YOUTU_BE_MARKER in url:
        video_id = url.split(YOUTU_BE_MARKER, 1)[1].split("?", 1)[0]
        return f"{YOUTUBE_PREFIX}{video_id}" if video_id else url

    return url


def expand_url(shortened: str) -> str:
    """
    Expand a shortened reference; unprefixed input is already a full URL.

    A non-URL song that already starts with "s:" or "y:" is rewritten here
    even though shorten_url() left it alone.
    """
    if shortened.startswith(SPOTIFY_PREFIX):
        return SPOTIFY_TRACK_URL + shortened[len(SPOTIFY_PREFIX):]
    if shortened.startswith(YOUTUBE_PREFIX):
        return YOUTUBE_WATCH_URL + shortened[len(YOUTUBE_PREFIX):]
    return shortened
