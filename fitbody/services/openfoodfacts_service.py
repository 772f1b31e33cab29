"""
Поиск продуктов в OpenFoodFacts.
Документация: https://openfoodfacts.github.io/openfoodfacts-server/api/

- Общий дедлайн 8с (settings.FOOD_SEARCH_TIMEOUT) на кеш и запрос, без повторов
- Redis-кеш с TTL 1 час; после ошибки Redis кеш пропускается 60с
- Circuit breaker: после 5 ошибок подряд - 60с без запросов
- Любой сбой -> FoodSearchUnavailable, роут отвечает "введите вручную"
"""
import asyncio
import hashlib
import json
import logging
import time
from typing import Dict, List, Optional, Tuple

import httpx
import redis.asyncio as aioredis

from fitbody.core.config import settings
from fitbody.services.calorie_calculator import round_half_up

logger = logging.getLogger(__name__)


class FoodSearchUnavailable(Exception):
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    ERROR = "error"

    MESSAGES = {
        TIMEOUT: "Search request timed out. Please try again or enter nutrition data manually.",
        UNAVAILABLE: "Food database temporarily unavailable. Please enter nutrition data manually.",
        ERROR: "Failed to search food items. Please try again or enter nutrition data manually.",
    }

    def __init__(self, reason: str):
        self.reason = reason
        self.message = self.MESSAGES.get(reason, self.MESSAGES[self.ERROR])
        super().__init__(self.message)


class OpenFoodFactsService:
    CACHE_TTL = 3600        # секунд - данные о БЖУ редко меняются
    PAGE_SIZE = 15
    MAX_RESULTS = 10
    FAILURE_THRESHOLD = 5   # ошибок подряд до открытия circuit breaker
    RECOVERY_TIMEOUT = 60   # секунд паузы при открытом circuit breaker и после сбоя Redis
    KJ_PER_KCAL = 4.184

    @property
    def _search_url(self) -> str:
        return f"{settings.OPENFOODFACTS_BASE_URL}/cgi/search.pl"

    def __init__(self):
        self._http: httpx.AsyncClient | None = None
        self._redis: aioredis.Redis | None = None
        self._failures: int = 0
        self._open_until: float = 0.0
        self._cache_paused_until: float = 0.0

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=settings.FOOD_SEARCH_TIMEOUT,
                follow_redirects=True,
                headers={"User-Agent": "FitBodyTrack-Nutrition/1.0"},
            )
        return self._http

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._redis

    # ------------------------------------------------------------------
    # Circuit breaker
    # ------------------------------------------------------------------

    def _circuit_is_open(self) -> bool:
        if self._failures >= self.FAILURE_THRESHOLD:
            if time.monotonic() < self._open_until:
                return True
            self._failures = 0
        return False

    def _record_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.FAILURE_THRESHOLD:
            self._open_until = time.monotonic() + self.RECOVERY_TIMEOUT
            logger.warning(f"OpenFoodFacts circuit OPEN - пауза {self.RECOVERY_TIMEOUT}с")

    def _record_success(self) -> None:
        if self._failures > 0:
            logger.info("OpenFoodFacts circuit CLOSED - сервис восстановлен")
        self._failures = 0

    # ------------------------------------------------------------------
    # Кеш
    # ------------------------------------------------------------------

    def _cache_key(self, query: str) -> str:
        digest = hashlib.md5(query.lower().strip().encode()).hexdigest()
        return f"off:search:{digest}"

    def _cache_available(self) -> bool:
        return time.monotonic() >= self._cache_paused_until

    def _pause_cache(self, error: Exception) -> None:
        self._cache_paused_until = time.monotonic() + self.RECOVERY_TIMEOUT
        logger.debug(f"Redis недоступен, кеш отключен на {self.RECOVERY_TIMEOUT}с: {error}")

    async def _cache_get(self, key: str) -> Optional[List]:
        if not self._cache_available():
            return None
        try:
            redis = await self._get_redis()
            raw = await redis.get(key)
            if raw:
                return json.loads(raw)
        except Exception as e:
            self._pause_cache(e)
        return None

    async def _cache_set(self, key: str, data: List) -> None:
        if not self._cache_available():
            return
        try:
            redis = await self._get_redis()
            await redis.setex(key, self.CACHE_TTL, json.dumps(data, ensure_ascii=False))
        except Exception as e:
            self._pause_cache(e)

    # ------------------------------------------------------------------
    # Нормализация ответа OpenFoodFacts
    # ------------------------------------------------------------------

    def _normalize_product(self, product: Dict) -> Optional[Dict]:
        """
        Продукт в формате формы ввода (значения на 100 г) или None.
        Нечисловые значения нутриентов дают ValueError/TypeError.
        """
        name = (product.get("product_name") or "").strip()
        nutriments = product.get("nutriments") or {}
        if not name or not nutriments:
            return None
        if not nutriments.get("energy-kcal_100g") and not nutriments.get("energy_100g"):
            return None

        calories = round_half_up(float(nutriments.get("energy-kcal_100g") or 0))
        if not calories and nutriments.get("energy_100g"):
            # energy_100g приходит в кДж
            calories = round_half_up(float(nutriments["energy_100g"]) / self.KJ_PER_KCAL)
        if calories <= 0:
            return None

        brands = product.get("brands") or ""
        return {
            "name": name,
            "calories": calories,
            "protein": round_half_up(float(nutriments.get("proteins_100g") or 0)),
            "carbs": round_half_up(float(nutriments.get("carbohydrates_100g") or 0)),
            "fat": round_half_up(float(nutriments.get("fat_100g") or 0)),
            "brand": brands.split(",")[0].strip() if brands else "",
            "serving_size": product.get("serving_size") or "100g",
            "quantity": product.get("quantity") or "",
        }

    def _parse_products(self, data: Dict) -> List[Dict]:
        if not isinstance(data, dict):
            raise ValueError(f"ожидался JSON-объект, получен {type(data).__name__}")

        results = []
        for product in data.get("products") or []:
            try:
                item = self._normalize_product(product)
            except (ValueError, TypeError, AttributeError) as e:
                logger.debug(f"OpenFoodFacts: пропущен продукт с некорректными данными: {e}")
                continue
            if item:
                results.append(item)
            if len(results) >= self.MAX_RESULTS:
                break
        return results

    # ------------------------------------------------------------------
    # Публичные методы
    # ------------------------------------------------------------------

    async def _lookup(self, query: str, cache_key: str) -> Tuple[List[Dict], bool]:
        """(результаты, взяты ли они из кеша)"""
        cached = await self._cache_get(cache_key)
        if cached is not None:
            logger.debug(f"OpenFoodFacts cache hit: '{query}'")
            return cached, True

        params = {
            "search_terms": query,
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": self.PAGE_SIZE,
            "fields": "product_name,brands,nutriments,serving_size,quantity",
        }

        try:
            client = await self._get_http()
            response = await client.get(self._search_url, params=params)
        except httpx.TimeoutException:
            logger.warning(f"OpenFoodFacts timeout: '{query}'")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.TIMEOUT)
        except httpx.HTTPError as e:
            logger.warning(f"OpenFoodFacts error: {e}")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.ERROR)

        if response.status_code >= 500:
            logger.warning(f"OpenFoodFacts HTTP {response.status_code}")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.UNAVAILABLE)
        if response.status_code != 200:
            logger.warning(f"OpenFoodFacts HTTP {response.status_code}")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.ERROR)

        try:
            results = self._parse_products(response.json())
        except ValueError as e:
            logger.warning(f"OpenFoodFacts вернул некорректный ответ: {e}")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.ERROR)

        self._record_success()
        logger.info(f"OpenFoodFacts: найдено {len(results)} продуктов по '{query}'")
        return results, False

    async def search_products(self, query: str) -> List[Dict]:
        """
        Поиск продуктов по названию.
        Кеш и запрос укладываются в один дедлайн FOOD_SEARCH_TIMEOUT.
        При таймауте/ошибке бросает FoodSearchUnavailable; повторов нет.
        """
        if self._circuit_is_open():
            logger.info("OpenFoodFacts circuit open - пропускаем запрос")
            raise FoodSearchUnavailable(FoodSearchUnavailable.UNAVAILABLE)

        deadline = time.monotonic() + settings.FOOD_SEARCH_TIMEOUT
        cache_key = self._cache_key(query)
        try:
            results, from_cache = await asyncio.wait_for(
                self._lookup(query, cache_key), timeout=settings.FOOD_SEARCH_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(f"OpenFoodFacts: дедлайн {settings.FOOD_SEARCH_TIMEOUT}с истек: '{query}'")
            self._record_failure()
            raise FoodSearchUnavailable(FoodSearchUnavailable.TIMEOUT)

        remaining = deadline - time.monotonic()
        if not from_cache and remaining > 0:
            try:
                await asyncio.wait_for(self._cache_set(cache_key, results), timeout=remaining)
            except asyncio.TimeoutError:
                logger.debug("Redis не ответил до дедлайна, результат не закеширован")
        return results

    async def close(self) -> None:
        """Закрыть соединения при завершении приложения."""
        if self._http:
            await self._http.aclose()
            self._http = None
        if self._redis:
            await self._redis.aclose()
            self._redis = None


# Singleton instance
openfoodfacts_service = OpenFoodFactsService()
