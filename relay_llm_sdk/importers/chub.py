"""Character card import from Chub (chub.ai / characterhub.org) pages."""

from typing import Optional

import httpx

from .png import read_character_card
from ..errors import ErrorMapper, InvalidURLError, ServerError, UnsupportedImportError
from ..http.transport import HttpxTransport, Transport
from ..models.character import CharacterCard, CharacterCardData
from ..observability.logging import ProviderLogger

CHUB_HOSTS = frozenset({"chub.ai", "characterhub.org"})
CHUB_AVATAR_URL = "https://avatars.charhub.io/avatars/{path}/chara_card_v2.png"


class ChubImporter:
    """Downloads a character's card PNG and parses the embedded card."""

    provider_name = "chub"

    def __init__(self, transport: Optional[Transport] = None, timeout: float = 60.0):
        self.transport = transport or HttpxTransport()
        self.timeout = timeout
        self.logger = ProviderLogger(self.provider_name)

    @staticmethod
    def card_path(url: str) -> str:
        """
        Extract the ``<creator>/<name>`` part of a character page URL.

        Raises:
            UnsupportedImportError: not a chub.ai or characterhub.org character page
            InvalidURLError: a character page URL with nothing after ``characters``
        """
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise InvalidURLError(f"Invalid URL: {url}", original_error=e) from e

        segments = [segment for segment in parsed.path.split("/") if segment]
        if parsed.host not in CHUB_HOSTS or "characters" not in segments:
            raise UnsupportedImportError(f"Unsupported URL import: {url}")

        path = segments[segments.index("characters") + 1:]
        if not path:
            raise InvalidURLError(f"No character path in {url}")
        return "/".join(path)

    async def import_from_url(self, url: str) -> CharacterCard:
        """
        Import the character card behind a Chub character page.

        The avatar of the returned card points at the downloaded image and
        the image bytes are kept in ``png_data``.
        """
        download_url = CHUB_AVATAR_URL.format(path=self.card_path(url))

        with self.logger.track_request("import_card", None):
            try:
                response = await self.transport.send(download_url, "GET", {}, None, self.timeout)
            except Exception as e:
                raise ErrorMapper.map_transport_error(e, self.provider_name) from e

            if not response.is_success:
                raise ServerError(response.status_code, provider=self.provider_name)

            card = read_character_card(response.content)
            data = (card.data or CharacterCardData()).model_copy(update={"avatar": download_url})
            return card.model_copy(update={"data": data, "png_data": response.content})

    async def aclose(self) -> None:
        await self.transport.aclose()
