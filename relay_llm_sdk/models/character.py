"""Character card models (Tavern V2 ``chara`` / V3 ``ccv3`` JSON)."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CharacterCardData(BaseModel):
    """The ``data`` block of a character card."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None
    personality: Optional[str] = None
    first_message: Optional[str] = Field(None, alias="first_mes")
    avatar: Optional[str] = None
    message_examples: Optional[str] = Field(None, alias="mes_example")
    scenario: Optional[str] = None
    creator_notes: Optional[str] = None
    system_prompt: Optional[str] = None
    post_history_instructions: Optional[str] = None
    creator: Optional[str] = None
    character_version: Optional[str] = None
    alternate_greetings: Optional[List[str]] = None
    tags: Optional[List[str]] = None


class CharacterCard(BaseModel):
    """A character card as embedded in PNG metadata.

    ``png_data`` is not part of the card JSON; importers attach the
    downloaded image so callers can display it without a second fetch.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    spec: Optional[str] = None
    spec_version: Optional[str] = None
    data: Optional[CharacterCardData] = None
    png_data: Optional[bytes] = Field(None, exclude=True)

    def context_fields(self) -> Dict[str, Any]:
        """Map the card onto ``GenerationConfig`` character-context fields."""
        data = self.data or CharacterCardData()
        return {
            "prompt_template": data.system_prompt or None,
            "character_description": data.description or None,
            "character_personality": data.personality or None,
            "character_scenario": data.scenario or None,
        }
