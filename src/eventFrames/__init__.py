"""Event frame compositor for the RNMSG scouting community."""

__version__ = "1.0.0"
