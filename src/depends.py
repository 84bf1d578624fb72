from fastapi import Request
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.retry import RetryPolicy
from src.adapter.services.database import serialize_sqlite_writers
from src.app.services.activity_price_catalog import ActivityPriceCatalog
from src.app.services.plan_catalog import PlanCatalog

engine = serialize_sqlite_writers(
    create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError, ConnectionError, TimeoutError)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_config(request: Request):
    return request.app.state.config


def get_activity_catalog(request: Request) -> ActivityPriceCatalog:
    return request.app.state.activity_catalog


def get_plan_catalog(request: Request) -> PlanCatalog:
    return request.app.state.plan_catalog


def build_read_retry_policy(config) -> RetryPolicy:
    return RetryPolicy(
        attempts=config.READ_RETRY_ATTEMPTS,
        base_delay=config.READ_RETRY_BASE_DELAY,
        max_delay=config.READ_RETRY_MAX_DELAY,
        retry_on=TRANSIENT_DB_ERRORS,
    )


def get_read_retry_policy(request: Request) -> RetryPolicy:
    return build_read_retry_policy(request.app.state.config)
