from verified_users import __version__

__all__ = ["__version__"]
