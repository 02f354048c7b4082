"""A top-down arcade game of waking enemies, power-ups, safe zones and highscores."""

__version__ = "0.1.0"