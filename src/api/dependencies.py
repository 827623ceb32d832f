from src.api.search_service import SearchBundle
from src.core.config import ApiSettings
from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from functools import lru_cache


@lru_cache(maxsize=1)
def get_search_bundle() -> SearchBundle:
    settings = ApiSettings.from_env()
    return SearchBundle(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    bundle = get_search_bundle()
    bundle.start()
    try:
        yield
    finally:
        await bundle.close()
