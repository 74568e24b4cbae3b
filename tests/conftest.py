from collections.abc import Callable
from typing import Optional, Union

import pytest
from httpx import ASGITransport, AsyncClient

from freshcart.core.config import Settings
from freshcart.core.services import build_services
from freshcart.domain.models.interaction import ActionKind, InteractionRecord
from freshcart.domain.models.product import AppContext, Product
from freshcart.domain.repositories.catalog_repo import KVCatalogRepo
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.repositories.kv_store import InMemoryKVStore
from freshcart.domain.services.rate_limiter import RateLimiter
from freshcart.domain.services.sample_data import SAMPLE_PRODUCTS

BASE = "http://test"


class FakeLLM:
    """Backend double: returns canned text (or raises) and records every prompt."""

    def __init__(self, reply: Union[str, Exception, Callable[[str], str]] = "[]"):
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def rec(pid: int, category: Optional[str], action: ActionKind = ActionKind.VIEW, name: str = "") -> InteractionRecord:
    return InteractionRecord(id=pid, name=name or f"product {pid}", category=category, timestamp="2024-01-01T00:00:00+00:00", action=action)


def make_ctx(products=SAMPLE_PRODUCTS, viewed=(), cart=(), purchased=(), categories=(), page="/") -> AppContext:
    return AppContext(
        products=list(products),
        viewed=list(viewed),
        cart=list(cart),
        purchased=list(purchased),
        categories=list(categories),
        current_page=page,
    )


@pytest.fixture
def products() -> list[Product]:
    return list(SAMPLE_PRODUCTS)


@pytest.fixture
def store() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture
async def catalog(store, products) -> KVCatalogRepo:
    repo = KVCatalogRepo(store)
    await repo.replace(products)
    return repo


@pytest.fixture
def interactions(store) -> InteractionRepo:
    return InteractionRepo(store, retention={ActionKind.VIEW: 50})


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, OPENAI_API_KEY=None, REDIS_URL=None, AI_MIN_INTERVAL_S=0)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
async def client(settings, store, catalog, fake_llm, fake_clock):
    from freshcart.main import app

    app.state.services = build_services(
        settings,
        store=store,
        reco_llm=fake_llm,
        chat_llm=fake_llm,
        limiter=RateLimiter(0, clock=fake_clock, sleep=fake_clock.sleep),
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
