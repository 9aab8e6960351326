"""Tests for resource descriptor construction."""

import pytest
from tftquery.errors import PayloadError
from tftquery.riot.routes import LeagueRoutes, MatchRoutes, SummonerRoutes


class TestRegionRouting:
    """Test platform vs regional hosts."""

    def test_summoner_uses_platform_host(self):
        res = SummonerRoutes("EUW1").by_puuid("abc")
        assert res.url == "https://euw1.api.riotgames.com/tft/summoner/v1/summoners/by-puuid/abc"

    def test_euw_match_uses_europe_group(self):
        res = MatchRoutes("euw1").by_match_id("EUW1_123")
        assert "europe.api.riotgames.com" in res.url

    def test_na_match_uses_americas_group(self):
        res = MatchRoutes("na1").by_match_id("NA1_1")
        assert "americas.api.riotgames.com" in res.url

    def test_kr_match_uses_asia_group(self):
        res = MatchRoutes("kr").by_match_id("KR_1")
        assert "asia.api.riotgames.com" in res.url

    def test_unknown_region_is_rejected(self):
        with pytest.raises(PayloadError) as exc:
            SummonerRoutes("mars1", "get_summoner_by_puuid")
        assert exc.value.field == "region"
        assert exc.value.operation == "get_summoner_by_puuid"


class TestPaths:
    """Test each resource path."""

    def test_summoner_name_is_quoted(self):
        res = SummonerRoutes("euw1").by_summoner_name("Le Roi/Lion")
        assert res.url.endswith("/by-name/Le%20Roi%2FLion")

    def test_match_ids_default_count(self):
        res = MatchRoutes("euw1").by_puuid_and_count("p1")
        assert res.url.endswith("/tft/match/v1/matches/by-puuid/p1/ids?count=20")

    def test_match_ids_explicit_count(self):
        res = MatchRoutes("euw1").by_puuid_and_count("p1", 5)
        assert res.url.endswith("ids?count=5")

    def test_league_tiers(self):
        routes = LeagueRoutes("euw1")
        assert routes.challenger().url.endswith("/tft/league/v1/challenger")
        assert routes.grandmaster().url.endswith("/tft/league/v1/grandmaster")
        assert routes.master().url.endswith("/tft/league/v1/master")

    def test_tier_and_division_uses_entries_path(self):
        res = LeagueRoutes("euw1").by_tier_and_division("gold", "i")
        assert res.url.endswith("/tft/league/v1/entries/GOLD/I")

    def test_league_by_id_and_summoner(self):
        routes = LeagueRoutes("euw1")
        assert routes.by_league_id("L-1").url.endswith("/tft/league/v1/leagues/L-1")
        assert routes.by_summoner_id("S1").url.endswith("/tft/league/v1/entries/by-summoner/S1")
