"""Find marker comments such as TODO in a working tree or in git history."""

__version__ = "0.1.0"
