"""List the tracks of a Spotify playlist or album after OAuth sign-in."""

__version__ = "0.1.0"
