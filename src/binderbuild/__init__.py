"""binderbuild: build a notebook environment from a repository's binder files."""

__version__ = "0.1.0"
