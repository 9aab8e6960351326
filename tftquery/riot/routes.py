# riot/routes.py

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from tftquery.errors import PayloadError

# Mapping plateforme → région globale pour /tft/match/v1
REGION_GROUPS = {
    "euw1": "europe", "eun1": "europe", "ru": "europe", "tr1": "europe",
    "kr": "asia",   "jp1": "asia",
    "na1": "americas", "br1": "americas", "la1": "americas", "la2": "americas",
    "oc1": "sea", "ph2": "sea", "sg2": "sea", "th2": "sea", "tw2": "sea", "vn2": "sea",
}

DEFAULT_MATCH_COUNT = 20


@dataclass(frozen=True)
class Resource:
    """A fully-qualified request target, ready for the transport."""
    name: str
    url: str


def _seg(value) -> str:
    return quote(str(value), safe="")


class _Routes:
    """Base class binding a region; `operation` names the caller for error messages."""

    def __init__(self, region: str, operation: str = ""):
        region = (region or "").lower()
        if region not in REGION_GROUPS:
            raise PayloadError("region", operation or type(self).__name__, "<String> valid platform")
        self.region = region
        self.operation = operation

    @property
    def platform_host(self) -> str:
        return f"https://{self.region}.api.riotgames.com"

    @property
    def regional_host(self) -> str:
        return f"https://{REGION_GROUPS[self.region]}.api.riotgames.com"


class SummonerRoutes(_Routes):
    base = "/tft/summoner/v1/summoners"

    def by_summoner_name(self, summoner_name: str) -> Resource:
        return Resource("summoner-by-name", f"{self.platform_host}{self.base}/by-name/{_seg(summoner_name)}")

    def by_account_id(self, account_id: str) -> Resource:
        return Resource("summoner-by-account", f"{self.platform_host}{self.base}/by-account/{_seg(account_id)}")

    def by_puuid(self, puuid: str) -> Resource:
        return Resource("summoner-by-puuid", f"{self.platform_host}{self.base}/by-puuid/{_seg(puuid)}")

    def by_summoner_id(self, summoner_id: str) -> Resource:
        return Resource("summoner-by-id", f"{self.platform_host}{self.base}/{_seg(summoner_id)}")


class MatchRoutes(_Routes):
    base = "/tft/match/v1/matches"

    def by_puuid_and_count(self, puuid: str, count: Optional[int] = None) -> Resource:
        count = DEFAULT_MATCH_COUNT if count is None else count
        return Resource(
            "match-ids-by-puuid",
            f"{self.regional_host}{self.base}/by-puuid/{_seg(puuid)}/ids?count={int(count)}",
        )

    def by_match_id(self, match_id: str) -> Resource:
        return Resource("match-by-id", f"{self.regional_host}{self.base}/{_seg(match_id)}")


class LeagueRoutes(_Routes):
    base = "/tft/league/v1"

    def challenger(self) -> Resource:
        return Resource("league-challenger", f"{self.platform_host}{self.base}/challenger")

    def grandmaster(self) -> Resource:
        return Resource("league-grandmaster", f"{self.platform_host}{self.base}/grandmaster")

    def master(self) -> Resource:
        return Resource("league-master", f"{self.platform_host}{self.base}/master")

    def by_summoner_id(self, summoner_id: str) -> Resource:
        return Resource(
            "league-by-summoner",
            f"{self.platform_host}{self.base}/entries/by-summoner/{_seg(summoner_id)}",
        )

    def by_league_id(self, league_id: str) -> Resource:
        return Resource("league-by-id", f"{self.platform_host}{self.base}/leagues/{_seg(league_id)}")

    def by_tier_and_division(self, tier: str, division: str) -> Resource:
        return Resource(
            "league-by-tier-division",
            f"{self.platform_host}{self.base}/entries/{_seg(str(tier).upper())}/{_seg(str(division).upper())}",
        )
