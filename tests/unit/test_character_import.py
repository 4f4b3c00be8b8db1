"""Tests for character card parsing and the Chub importer."""

import base64

import httpx
import pytest

from helpers.streaming_mocks import FakeTransport, build_card_png, encode_card
from relay_llm_sdk.errors import (
    DecodingError,
    InvalidURLError,
    RequestTimeoutError,
    ServerError,
    UnsupportedImportError,
)
from relay_llm_sdk.http.transport import TransportResponse
from relay_llm_sdk.importers import ChubImporter, CharacterCardError, read_character_card
from relay_llm_sdk.importers.png import read_text_chunks

V2_CARD = {
    "spec": "chara_card_v2",
    "spec_version": "2.0",
    "data": {
        "name": "Captain Anne",
        "description": "A pirate captain.",
        "personality": "Bold",
        "scenario": "Aboard the ship",
        "first_mes": "Ahoy!",
        "mes_example": "<START>\n{{char}}: Arr.",
        "tags": ["pirate"],
        "avatar": "none",
        "extensions": {"depth_prompt": {"depth": 4}},
    },
}

V3_CARD = {
    "spec": "chara_card_v3",
    "spec_version": "3.0",
    "data": {"name": "Captain Anne (v3)", "description": "Newer card."},
}


@pytest.mark.unit
class TestReadCharacterCard:

    def test_v2_card(self):
        card = read_character_card(build_card_png({"chara": encode_card(V2_CARD)}))

        assert card.spec == "chara_card_v2"
        assert card.data.name == "Captain Anne"
        assert card.data.first_message == "Ahoy!"
        assert card.data.message_examples == "<START>\n{{char}}: Arr."
        assert card.data.tags == ["pirate"]
        assert card.png_data is None

    def test_v3_takes_precedence(self):
        png = build_card_png({"chara": encode_card(V2_CARD), "ccv3": encode_card(V3_CARD)})
        card = read_character_card(png)
        assert card.data.name == "Captain Anne (v3)"

    def test_keyword_is_case_insensitive(self):
        card = read_character_card(build_card_png({"Chara": encode_card(V2_CARD)}))
        assert card.data.name == "Captain Anne"

    def test_context_fields(self):
        card = read_character_card(build_card_png({"chara": encode_card(V2_CARD)}))
        assert card.context_fields() == {
            "prompt_template": None,
            "character_description": "A pirate captain.",
            "character_personality": "Bold",
            "character_scenario": "Aboard the ship",
        }

    def test_other_text_chunks_are_collected(self):
        png = build_card_png({"Software": "paint", "chara": encode_card(V2_CARD)})
        assert read_text_chunks(png)["Software"] == "paint"

    def test_not_a_png(self):
        with pytest.raises(CharacterCardError):
            read_character_card(b"GIF89a....")

    def test_no_card(self):
        with pytest.raises(CharacterCardError) as exc_info:
            read_character_card(build_card_png({"Software": "paint"}))
        assert "No character data" in str(exc_info.value)

    def test_bad_base64(self):
        with pytest.raises(CharacterCardError):
            read_character_card(build_card_png({"chara": "!!! not base64 !!!"}))

    def test_not_utf8(self):
        value = base64.b64encode(b"\xff\xfe\xfa").decode("ascii")
        with pytest.raises(CharacterCardError):
            read_character_card(build_card_png({"chara": value}))

    def test_not_json(self):
        value = base64.b64encode(b"just words").decode("ascii")
        with pytest.raises(CharacterCardError):
            read_character_card(build_card_png({"chara": value}))

    def test_card_errors_are_decoding_errors(self):
        with pytest.raises(DecodingError):
            read_character_card(b"")

    def test_truncated_chunk_ends_walk(self):
        png = build_card_png({"chara": encode_card(V2_CARD)})
        signature_and_header = png[:8 + 25]
        with pytest.raises(CharacterCardError):
            read_character_card(signature_and_header + png[8 + 25:8 + 40])


@pytest.mark.unit
class TestChubImporter:

    @pytest.mark.parametrize("url, path", [
        ("https://chub.ai/characters/Anonymous/awesomeCard", "Anonymous/awesomeCard"),
        ("https://characterhub.org/characters/someone/pirate-anne", "someone/pirate-anne"),
    ])
    def test_card_path(self, url, path):
        assert ChubImporter.card_path(url) == path

    @pytest.mark.parametrize("url", [
        "https://example.com/characters/a/b",
        "https://chub.ai/lorebooks/a/b",
        "https://venus.chub.ai/characters/a/b",
    ])
    def test_unsupported_url(self, url):
        with pytest.raises(UnsupportedImportError):
            ChubImporter.card_path(url)

    def test_missing_character_path(self):
        with pytest.raises(InvalidURLError):
            ChubImporter.card_path("https://chub.ai/characters/")

    @pytest.mark.asyncio
    async def test_import_from_url(self):
        png = build_card_png({"chara": encode_card(V2_CARD)})
        transport = FakeTransport(responses={
            "/avatars/Anonymous/awesomeCard/chara_card_v2.png": TransportResponse(200, png)
        })
        importer = ChubImporter(transport=transport)

        card = await importer.import_from_url("https://chub.ai/characters/Anonymous/awesomeCard")

        expected_url = "https://avatars.charhub.io/avatars/Anonymous/awesomeCard/chara_card_v2.png"
        assert transport.requests[0]["url"] == expected_url
        assert transport.requests[0]["method"] == "GET"
        assert card.data.avatar == expected_url
        assert card.data.name == "Captain Anne"
        assert card.png_data == png

    @pytest.mark.asyncio
    async def test_unsupported_url_sends_nothing(self):
        transport = FakeTransport()
        with pytest.raises(UnsupportedImportError):
            await ChubImporter(transport=transport).import_from_url("https://example.com/characters/a/b")
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_download_failure_is_server_error(self):
        importer = ChubImporter(transport=FakeTransport())
        with pytest.raises(ServerError) as exc_info:
            await importer.import_from_url("https://chub.ai/characters/a/missing")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_download_timeout(self):
        importer = ChubImporter(transport=FakeTransport(send_error=httpx.ReadTimeout("slow")))
        with pytest.raises(RequestTimeoutError):
            await importer.import_from_url("https://chub.ai/characters/a/b")
