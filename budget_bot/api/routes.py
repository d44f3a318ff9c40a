from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from budget_bot.db.session import get_session
from budget_bot.schemas.jobs import JobResult
from budget_bot.schemas.wa import IncomingMessage, WAResponse
from budget_bot.services.notifications import JOBS, run_job
from budget_bot.services.repository import BudgetRepository
from budget_bot.services.sessions import SessionManager
from budget_bot.services.transport import WAGateway
from budget_bot.services.wa import handle_incoming_message, local_today

router = APIRouter()


def get_repository(session: AsyncSession = Depends(get_session)) -> BudgetRepository:
    return BudgetRepository(session)


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_gateway() -> WAGateway:
    return WAGateway()


@router.get("/healthz", response_model=dict)
async def healthz(sessions: SessionManager = Depends(get_session_manager)) -> dict:
    return {"status": "ok", "active_sessions": len(sessions)}


@router.post("/wa/incoming", response_model=WAResponse)
async def wa_incoming(
    payload: IncomingMessage,
    repo: BudgetRepository = Depends(get_repository),
    sessions: SessionManager = Depends(get_session_manager),
) -> WAResponse:
    return await handle_incoming_message(repo, sessions, payload)


@router.post("/jobs/{job_name}", response_model=JobResult)
async def trigger_job(
    job_name: str,
    repo: BudgetRepository = Depends(get_repository),
    sessions: SessionManager = Depends(get_session_manager),
    gateway: WAGateway = Depends(get_gateway),
) -> JobResult:
    if job_name not in JOBS:
        raise HTTPException(status_code=404, detail=f"Unknown job '{job_name}'")
    return await run_job(job_name, repo, sessions, gateway, local_today())
