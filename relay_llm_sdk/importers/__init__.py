"""Character card importers."""

from .chub import ChubImporter
from .png import CharacterCardError, read_character_card

__all__ = ["ChubImporter", "CharacterCardError", "read_character_card"]
