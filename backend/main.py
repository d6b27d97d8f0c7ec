from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_settings
from backend.api.routes import analysis, prompts
from backend.services.logging import logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging
    setup_logging()
    logger.info("Starting Paper Critic service")

    logger.info(f"AI Provider: {settings.ai_provider}")
    logger.info(f"CORS Origins: {settings.cors_origins}")
    if settings.ai_provider == "gemini" and not settings.google_generative_ai_api_key:
        logger.warning("No default Gemini API key configured; requests must send apiKey")

    yield

    logger.info("Shutting down Paper Critic service")


settings = get_settings()

app = FastAPI(
    title="Paper Critic",
    description="LLM feedback, reviews and section outlines for academic papers",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis.router, tags=["generation"])
app.include_router(prompts.router, tags=["prompts"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


def run():
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.timeout_keep_alive,
    )


if __name__ == "__main__":
    run()
