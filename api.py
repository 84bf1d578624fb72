import asyncio
import sys
import uvicorn
from sqlmodel import SQLModel
from config import ApplicationConfig
from src.api.app import create_app
from src.depends import engine
import src.domain  # noqa: F401  registers table models on SQLModel.metadata

app = create_app(ApplicationConfig)


async def init_db():
    """Create missing tables (local/dev databases)"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


if __name__ == "__main__":
    if "--init-db" in sys.argv:
        asyncio.run(init_db())

    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
