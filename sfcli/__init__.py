"""Git helpers, human-readable PHP/FPM/Symfony/JSON log formatting and file watching."""

__version__ = "0.1.0"