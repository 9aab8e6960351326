# query.py – Session de requêtes TFT avec cache-aside

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Dict, List, Optional

import aiohttp
import redis.exceptions as _redis_exc

from tftquery.cache.store import CachePort, build_cache
from tftquery.config import settings
from tftquery.errors import (
    CacheError,
    CacheNotConfiguredError,
    FetchError,
    PayloadError,
)
from tftquery.riot.client import RiotAPIError, RiotClient
from tftquery.riot.routes import (
    DEFAULT_MATCH_COUNT,
    LeagueRoutes,
    MatchRoutes,
    Resource,
    SummonerRoutes,
)

log = logging.getLogger(__name__)

_CACHE_ERRORS = (CacheError, _redis_exc.RedisError, OSError)
_FETCH_ERRORS = (RiotAPIError, aiohttp.ClientError, asyncio.TimeoutError)


def primary_league_entry(entries: Optional[List[Dict[str, Any]]]) -> Dict[str, Any]:
    """
    Select the ranked entry kept by the aggregate view.

    Only the first entry returned by the league endpoint (the primary queue)
    is merged; other queues are dropped. A summoner with no ranked entry
    contributes nothing.
    """
    if not entries:
        return {}
    return dict(entries[0])


class TftQuery:
    """
    One configured query session: region, credential, payload and optional cache.

    Every resource method reads its parameters from the payload unless a
    keyword override is given for that call. Overrides are never written back,
    so the aggregate helpers can run concurrently on one session.

    Cache keys carry no region. Sessions for different regions that share
    one cache backend should each use their own key prefix
    (``cache_config={"prefix": "euw1:"}``).
    """

    def __init__(
        self,
        region: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        api_key: Optional[str] = None,
        use_cache: bool = False,
        cache_config: Optional[Dict[str, Any]] = None,
        client: Optional[RiotClient] = None,
    ):
        self.region = (region or settings.DEFAULT_REGION).lower()
        self.payload: Dict[str, Any] = dict(payload or {})
        self.api_key = api_key or settings.RIOT_API_KEY
        self.client = client or RiotClient(self.api_key)
        self._owns_client = client is None

        self.cache: Optional[CachePort] = None
        self._owns_cache = False
        self._retired_caches: List[CachePort] = []
        if use_cache:
            self.enable_cache(cache_config)

    # ───────────────────────────── Utilities ──────────────────────────
    def update_payload(self, partial: Dict[str, Any]) -> None:
        """Merge ``partial`` into the payload; fields it doesn't mention are kept."""
        self.payload = {**self.payload, **partial}

    def enable_cache(
        self,
        cache_config: Optional[Dict[str, Any]] = None,
        cache: Optional[CachePort] = None,
    ) -> None:
        """Attach a cache, replacing any previous one. Pass ``cache`` to share a backend."""
        if self.cache is not None and self._owns_cache:
            self._retired_caches.append(self.cache)
        self.cache = cache if cache is not None else build_cache(cache_config)
        self._owns_cache = cache is None

    async def flush_cache(self) -> str:
        if self.cache is None:
            raise CacheNotConfiguredError("flush_cache")
        await self.cache.flush()
        log.info("Cache flushed")
        return "OK"

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()
        while self._retired_caches:
            await self._retired_caches.pop().close()
        if self.cache is not None and self._owns_cache:
            await self.cache.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ───────────────────────────── Cache-aside core ───────────────────
    def _field(self, operation: str, field: str, override: Any = None, expected: str = "<String>") -> Any:
        value = override if override is not None else self.payload.get(field)
        if value is None or value == "":
            raise PayloadError(field, operation, expected)
        return value

    async def _resolve(self, operation: str, key: str, resource: Resource) -> Any:
        """
        Read-through lookup shared by every resource method.

        A failing cache read counts as a miss and a failing cache write is
        only logged: the fetched value is returned either way.
        """
        cache = self.cache
        if cache is not None:
            try:
                data = await cache.get(key)
            except _CACHE_ERRORS as e:
                log.warning(f"Cache read failed for {key}, falling back to API: {e}")
                data = None
            if data is not None:
                log.debug(f"Cache hit: {key}")
                return data
            log.debug(f"Cache miss: {key}")

        try:
            data = await self.client.fetch(resource)
        except _FETCH_ERRORS as e:
            log.debug(f"{operation} failed: {e}")
            raise FetchError(operation, e) from e

        if cache is not None:
            try:
                await cache.set(key, data)
            except _CACHE_ERRORS as e:
                log.warning(f"Cache write failed for {key}: {e}")
        return data

    # ───────────────────────────── Summoner ───────────────────────────
    async def get_summoner_by_summoner_name(self, summoner_name: Optional[str] = None) -> Dict[str, Any]:
        op = "get_summoner_by_summoner_name"
        name = self._field(op, "summonerName", summoner_name)
        resource = SummonerRoutes(self.region, op).by_summoner_name(name)
        return await self._resolve(op, f"summoner-summonerByName-{name}", resource)

    async def get_summoner_by_account_id(self, account_id: Optional[str] = None) -> Dict[str, Any]:
        op = "get_summoner_by_account_id"
        account = self._field(op, "accountId", account_id)
        resource = SummonerRoutes(self.region, op).by_account_id(account)
        return await self._resolve(op, f"summoner-summonerByAccountId-{account}", resource)

    async def get_summoner_by_puuid(self, puuid: Optional[str] = None) -> Dict[str, Any]:
        op = "get_summoner_by_puuid"
        puuid = self._field(op, "puuid", puuid)
        resource = SummonerRoutes(self.region, op).by_puuid(puuid)
        return await self._resolve(op, f"summoner-summonerByPuuid-{puuid}", resource)

    async def get_summoner_by_summoner_id(self, summoner_id: Optional[str] = None) -> Dict[str, Any]:
        op = "get_summoner_by_summoner_id"
        sid = self._field(op, "summonerId", summoner_id)
        resource = SummonerRoutes(self.region, op).by_summoner_id(sid)
        return await self._resolve(op, f"summoner-summonerBySummonerId-{sid}", resource)

    # ───────────────────────────── Match ──────────────────────────────
    async def get_match_by_puuid_and_count(
        self, puuid: Optional[str] = None, count: Optional[int] = None
    ) -> List[str]:
        op = "get_match_by_puuid_and_count"
        puuid = self._field(op, "puuid", puuid)
        count = count if count is not None else self.payload.get("count")
        if count is not None and (isinstance(count, bool) or not isinstance(count, int) or count < 1):
            raise PayloadError("count", op, "<Integer>")
        resource = MatchRoutes(self.region, op).by_puuid_and_count(puuid, count)
        # le count fait partie de l'identité de la requête
        key = f"match-matchByPuuid-{puuid}-{count or DEFAULT_MATCH_COUNT}"
        return await self._resolve(op, key, resource)

    async def get_match_by_match_id(self, match_id: Optional[str] = None) -> Dict[str, Any]:
        op = "get_match_by_match_id"
        mid = self._field(op, "matchId", match_id)
        resource = MatchRoutes(self.region, op).by_match_id(mid)
        return await self._resolve(op, f"match-matchByMatchId-{mid}", resource)

    # ───────────────────────────── League ─────────────────────────────
    async def get_challenger_league(self) -> Dict[str, Any]:
        op = "get_challenger_league"
        return await self._resolve(op, "league-challenger", LeagueRoutes(self.region, op).challenger())

    async def get_grandmaster_league(self) -> Dict[str, Any]:
        op = "get_grandmaster_league"
        return await self._resolve(op, "league-grandmaster", LeagueRoutes(self.region, op).grandmaster())

    async def get_master_league(self) -> Dict[str, Any]:
        op = "get_master_league"
        return await self._resolve(op, "league-master", LeagueRoutes(self.region, op).master())

    async def get_league_by_summoner_id(self, summoner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        op = "get_league_by_summoner_id"
        sid = self._field(op, "summonerId", summoner_id)
        resource = LeagueRoutes(self.region, op).by_summoner_id(sid)
        return await self._resolve(op, f"league-bySummonerId-{sid}", resource)

    async def get_league_by_league_id(self, league_id: Optional[str] = None) -> Dict[str, Any]:
        op = "get_league_by_league_id"
        lid = self._field(op, "leagueId", league_id)
        resource = LeagueRoutes(self.region, op).by_league_id(lid)
        return await self._resolve(op, f"league-byLeagueId-{lid}", resource)

    async def get_league_by_tier_and_division(
        self, tier: Optional[str] = None, division: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        op = "get_league_by_tier_and_division"
        # la route met tier/division en majuscules : la clé doit suivre
        tier = str(self._field(op, "tier", tier)).upper()
        division = str(self._field(op, "division", division)).upper()
        resource = LeagueRoutes(self.region, op).by_tier_and_division(tier, division)
        return await self._resolve(op, f"league-byTierAndDivision-{tier}-{division}", resource)

    # ───────────────────────────── Batch / aggregate ──────────────────
    async def get_batch_of_match_info(self, match_ids: Optional[Sequence] = None) -> Dict[str, Any]:
        """
        Fetch every match in ``matchIds`` in order.

        Returns ``{"game0": ..., "game1": ...}`` keyed by input position.
        The payload's own ``matchId`` is never touched, whether the batch
        succeeds or fails; the first failing match aborts the whole batch.
        """
        op = "get_batch_of_match_info"
        ids = match_ids if match_ids is not None else self.payload.get("matchIds")
        if ids is None or isinstance(ids, (str, bytes)) or not isinstance(ids, Sequence):
            raise PayloadError("matchIds", op, "<Array>:<String>")
        if any(not isinstance(mid, str) or not mid for mid in ids):
            raise PayloadError("matchIds", op, "<Array>:<String>")

        match_info: Dict[str, Any] = {}
        for i, mid in enumerate(ids):
            match_info[f"game{i}"] = await self.get_match_by_match_id(match_id=mid)
        return match_info

    async def get_all_info_by_summoner_name(self, summoner_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Summoner profile + primary ranked entry + recent matches in one record.

        Steps run strictly in order (summoner → league → match ids → match
        details); any failure aborts with that step's error and nothing
        partial is returned.
        """
        op = "get_all_info_by_summoner_name"
        summoner = await self.get_summoner_by_summoner_name(summoner_name)
        info: Dict[str, Any] = dict(summoner)

        summoner_id, puuid = info.get("id"), info.get("puuid")
        if not summoner_id or not puuid:
            raise FetchError(op, RiotAPIError("Summoner response is missing 'id' or 'puuid'"))

        entries = await self.get_league_by_summoner_id(summoner_id=summoner_id)
        info.update(primary_league_entry(entries))

        match_ids = await self.get_match_by_puuid_and_count(puuid=puuid)
        info["matchIds"] = match_ids

        info["allMatchInfo"] = await self.get_batch_of_match_info(match_ids=match_ids)
        log.info(f"Aggregated {len(match_ids)} matches for {info.get('name', summoner_id)}")
        return info
