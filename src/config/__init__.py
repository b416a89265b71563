"""Configuration package.

Settings are built when ``src.config.settings`` is first imported, so invalid
``TODO_*`` environment values fail there rather than at package import.
"""

__all__: list[str] = []
