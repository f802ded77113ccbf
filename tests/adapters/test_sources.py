"""Tests for the count sources — request shape, decoding, failure classification."""

import asyncio
from types import SimpleNamespace
from unittest.mock import patch

import aiohttp
import pytest

from guildwatch.adapters.sources import (
    DiscordApiSource,
    DiscordBotListSource,
    MutualGuildSource,
    PushEndpointSource,
    TopGGSource,
    default_sources,
)
from guildwatch.domain.models import (
    DECODE,
    NETWORK,
    PARTIAL,
    PROTOCOL,
    SEMANTIC,
    BotCredentials,
)

BOT_ID = "111"
SESSION = "aiohttp.ClientSession"


def _page(start: int, size: int) -> list:
    return [{"id": str(start + i), "name": f"guild {start + i}"} for i in range(size)]


# ---------------------------------------------------------------------------
# Push endpoint
# ---------------------------------------------------------------------------

class TestPushEndpoint:
    creds = BotCredentials(push_url="https://stats.example.com/bot")

    async def _resolve(self, fake):
        with patch(SESSION, fake):
            return await PushEndpointSource().resolve(BOT_ID, self.creds)

    def test_availability(self):
        source = PushEndpointSource()
        assert source.is_available(self.creds) is True
        assert source.is_available(BotCredentials()) is False

    @pytest.mark.asyncio
    async def test_camel_case_number(self, fake_http):
        fake = fake_http({"guildCount": 42})
        result = await self._resolve(fake)
        assert result.success is True
        assert result.count == 42
        assert result.source == "push_endpoint"
        assert fake.calls[0]["url"] == "https://stats.example.com/bot"

    @pytest.mark.asyncio
    async def test_numeric_string(self, fake_http):
        result = await self._resolve(fake_http({"guilds": "42"}))
        assert result.success is True
        assert result.count == 42

    @pytest.mark.asyncio
    async def test_unrecognised_fields(self, fake_http):
        result = await self._resolve(fake_http({"color": "red"}))
        assert result.success is False
        assert result.kind == SEMANTIC

    @pytest.mark.asyncio
    async def test_field_priority_beats_document_order(self, fake_http):
        result = await self._resolve(fake_http({"servers": 5, "server_count": 7}))
        assert result.count == 7

    @pytest.mark.asyncio
    async def test_unusable_value_falls_through(self, fake_http):
        result = await self._resolve(fake_http({"server_count": "lots", "guilds": 3}))
        assert result.count == 3

    @pytest.mark.asyncio
    async def test_float_value(self, fake_http):
        result = await self._resolve(fake_http({"serverCount": 12.0}))
        assert result.count == 12

    @pytest.mark.asyncio
    async def test_http_error(self, fake_http):
        result = await self._resolve(fake_http((503, "maintenance")))
        assert result.success is False
        assert result.kind == PROTOCOL
        assert "503" in result.error

    @pytest.mark.asyncio
    async def test_http_error_with_undecodable_body(self, fake_http):
        result = await self._resolve(fake_http((503, b"\xff\xfe bad")))
        assert result.success is False
        assert result.kind == PROTOCOL
        assert result.error.startswith("HTTP 503")

    @pytest.mark.asyncio
    async def test_undecodable_success_body(self, fake_http):
        result = await self._resolve(fake_http((200, b"\xff\xfe")))
        assert result.success is False
        assert result.kind == DECODE

    @pytest.mark.asyncio
    async def test_empty_body(self, fake_http):
        result = await self._resolve(fake_http((200, b"")))
        assert result.success is False
        assert result.kind == DECODE

    @pytest.mark.asyncio
    async def test_invalid_json(self, fake_http):
        result = await self._resolve(fake_http((200, "<html>not json</html>")))
        assert result.success is False
        assert result.kind == DECODE

    @pytest.mark.asyncio
    async def test_non_object_body(self, fake_http):
        result = await self._resolve(fake_http([1, 2, 3]))
        assert result.success is False
        assert result.kind == DECODE

    @pytest.mark.asyncio
    async def test_timeout(self, fake_http):
        result = await self._resolve(fake_http(asyncio.TimeoutError()))
        assert result.success is False
        assert result.kind == NETWORK

    @pytest.mark.asyncio
    async def test_unreachable(self, fake_http):
        result = await self._resolve(fake_http(aiohttp.ClientConnectionError("refused")))
        assert result.success is False
        assert result.kind == NETWORK
        assert "refused" in result.error

    @pytest.mark.asyncio
    async def test_session_timeout_is_bounded(self, fake_http):
        fake = fake_http({"guilds": 1})
        await self._resolve(fake)
        assert fake.session_kwargs[0]["timeout"].total == 10


# ---------------------------------------------------------------------------
# Discord API pagination
# ---------------------------------------------------------------------------

class TestDiscordApi:
    creds = BotCredentials(api_token="bot-token")

    async def _resolve(self, fake):
        with patch(SESSION, fake):
            return await DiscordApiSource().resolve(BOT_ID, self.creds)

    def test_availability(self):
        assert DiscordApiSource().is_available(self.creds) is True
        assert DiscordApiSource().is_available(BotCredentials()) is False

    @pytest.mark.asyncio
    async def test_three_pages_short_last(self, fake_http):
        fake = fake_http(_page(0, 100), _page(100, 100), _page(200, 37))
        result = await self._resolve(fake)
        assert result.success is True
        assert result.count == 237
        assert len(fake.calls) == 3

    @pytest.mark.asyncio
    async def test_terminates_on_empty_page(self, fake_http):
        fake = fake_http(_page(0, 100), _page(100, 100), _page(200, 100), [])
        result = await self._resolve(fake)
        assert result.count == 300
        assert len(fake.calls) == 4

    @pytest.mark.asyncio
    async def test_cursor_is_last_id_of_previous_page(self, fake_http):
        fake = fake_http(_page(0, 100), _page(100, 5))
        await self._resolve(fake)
        first, second = fake.calls
        assert "after" not in first["params"]
        assert first["params"]["limit"] == "100"
        assert second["params"]["after"] == "99"
        assert first["headers"]["Authorization"] == "Bot bot-token"
        assert first["url"].endswith("/users/@me/guilds")

    @pytest.mark.asyncio
    async def test_single_partial_page(self, fake_http):
        result = await self._resolve(fake_http(_page(0, 12)))
        assert result.count == 12

    @pytest.mark.asyncio
    async def test_no_guilds(self, fake_http):
        result = await self._resolve(fake_http([]))
        assert result.success is True
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_error_on_first_page(self, fake_http):
        result = await self._resolve(fake_http((401, '{"message": "401: Unauthorized"}')))
        assert result.success is False
        assert result.kind == PROTOCOL

    @pytest.mark.asyncio
    async def test_error_on_later_page_fails_whole_count(self, fake_http):
        fake = fake_http(_page(0, 100), (500, "oops"))
        result = await self._resolve(fake)
        assert result.success is False
        assert result.count is None
        assert result.kind == PROTOCOL

    @pytest.mark.asyncio
    async def test_timeout_on_later_page(self, fake_http):
        result = await self._resolve(fake_http(_page(0, 100), asyncio.TimeoutError()))
        assert result.success is False
        assert result.kind == NETWORK

    @pytest.mark.asyncio
    async def test_non_list_page(self, fake_http):
        result = await self._resolve(fake_http({"message": "nope"}))
        assert result.success is False
        assert result.kind == DECODE

    @pytest.mark.asyncio
    async def test_cursor_must_advance(self, fake_http):
        page = _page(0, 100)
        result = await self._resolve(fake_http(page, page))
        assert result.success is False
        assert result.kind == PROTOCOL


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

class TestTopGG:
    creds = BotCredentials(topgg_token="topgg-secret")

    @pytest.mark.asyncio
    async def test_success(self, fake_http):
        fake = fake_http({"server_count": 1234, "shard_count": 2})
        with patch(SESSION, fake):
            result = await TopGGSource().resolve(BOT_ID, self.creds)
        assert result.success is True
        assert result.count == 1234
        assert fake.calls[0]["url"] == "https://top.gg/api/bots/111/stats"
        assert fake.calls[0]["headers"]["Authorization"] == "topgg-secret"

    @pytest.mark.asyncio
    async def test_unauthorized(self, fake_http):
        with patch(SESSION, fake_http((401, "Unauthorized"))):
            result = await TopGGSource().resolve(BOT_ID, self.creds)
        assert result.success is False
        assert result.kind == PROTOCOL

    @pytest.mark.asyncio
    async def test_missing_field(self, fake_http):
        with patch(SESSION, fake_http({"shard_count": 2})):
            result = await TopGGSource().resolve(BOT_ID, self.creds)
        assert result.success is False
        assert result.kind == SEMANTIC

    def test_availability(self):
        assert TopGGSource().is_available(self.creds) is True
        assert TopGGSource().is_available(BotCredentials()) is False


class TestDiscordBotList:
    @pytest.mark.asyncio
    async def test_success_float(self, fake_http):
        fake = fake_http({"guilds": 1000.0, "users": 5})
        with patch(SESSION, fake):
            result = await DiscordBotListSource().resolve(BOT_ID, BotCredentials())
        assert result.success is True
        assert result.count == 1000
        assert fake.calls[0]["url"] == "https://discordbotlist.com/api/v1/bots/111/stats"
        assert not fake.calls[0].get("headers")

    @pytest.mark.asyncio
    async def test_string_guilds_rejected(self, fake_http):
        with patch(SESSION, fake_http({"guilds": "12"})):
            result = await DiscordBotListSource().resolve(BOT_ID, BotCredentials())
        assert result.success is False
        assert result.kind == SEMANTIC

    @pytest.mark.asyncio
    async def test_not_found(self, fake_http):
        with patch(SESSION, fake_http((404, '{"error": "not found"}'))):
            result = await DiscordBotListSource().resolve(BOT_ID, BotCredentials())
        assert result.success is False
        assert result.kind == PROTOCOL

    def test_always_available(self):
        assert DiscordBotListSource().is_available(BotCredentials()) is True


# ---------------------------------------------------------------------------
# Mutual guilds
# ---------------------------------------------------------------------------

def _guild(*member_ids):
    return SimpleNamespace(members=[SimpleNamespace(id=m) for m in member_ids])


class TestMutualGuilds:
    def test_unavailable_until_wired(self):
        source = MutualGuildSource()
        assert source.is_available(BotCredentials()) is False
        source.wire(lambda: [])
        assert source.is_available(BotCredentials()) is True

    @pytest.mark.asyncio
    async def test_partial_count_is_still_a_failure(self):
        guilds = [_guild(111, 5), _guild(6), _guild(7, 111)]
        source = MutualGuildSource(lambda: guilds)
        result = await source.resolve("111", BotCredentials())
        assert result.success is False
        assert result.kind == PARTIAL
        assert result.partial_count == 2
        assert result.count is None

    @pytest.mark.asyncio
    async def test_not_found(self):
        source = MutualGuildSource(lambda: [_guild(5), _guild()])
        result = await source.resolve("111", BotCredentials())
        assert result.success is False
        assert result.kind == SEMANTIC
        assert result.partial_count is None


class TestDefaultSources:
    def test_priority_order(self):
        names = [s.name for s in default_sources()]
        assert names == ["push_endpoint", "discord_api", "topgg", "discordbotlist", "mutual_guilds"]

    def test_reuses_given_mutual_source(self):
        mutual = MutualGuildSource()
        assert default_sources(mutual=mutual)[-1] is mutual
