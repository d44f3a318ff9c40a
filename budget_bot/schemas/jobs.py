from typing import Literal

from pydantic import BaseModel

JobName = Literal["morning", "budget_check", "reminders", "evening", "night"]


class JobResult(BaseModel):
    job: JobName
    sessions: int
    sent: int = 0
    skipped: int = 0
    failed: int = 0
