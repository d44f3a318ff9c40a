from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from budget_bot.api.routes import router as api_router
from budget_bot.core.config import AppConfig
from budget_bot.db.session import init_db
from budget_bot.services.sessions import SessionManager

app_config = AppConfig()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    app.state.sessions = SessionManager()
    logger.info("Session store ready")
    yield
    logger.info("Dropping active sessions", count=len(app.state.sessions))
    app.state.sessions.clear()


app = FastAPI(title=app_config.description, version=app_config.version, lifespan=lifespan)
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "budget-tracker-bot up", "version": app_config.version}
