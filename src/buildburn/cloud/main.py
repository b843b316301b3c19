from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from ..analyzer import analyze
from ..cost import calculate_cost
from ..model import Job, group_by_workflow
from ..recommendations import generate_recommendations
from ..schemas import JobPayload
from ..settings import DEFAULT_DAYS, load_rates

app = FastAPI(title="BuildBurn API")

# -------------------- Schemas --------------------

class ReportRequest(BaseModel):
    jobs: list[JobPayload] = Field(default_factory=list)
    days: int = DEFAULT_DAYS
    default_os: str = "linux"

    def to_jobs(self) -> list[Job]:
        return [j.to_job() for j in self.jobs]

class RecommendationResponse(BaseModel):
    rule_id: str
    severity: str
    estimated_monthly_savings: float
    fix: str

# -------------------- Endpoints --------------------

@app.get("/health")
async def health():
    return {"ok": True}

@app.post("/reports/cost")
async def cost_report(req: ReportRequest) -> dict[str, Any]:
    report = calculate_cost(group_by_workflow(req.to_jobs()), req.default_os, req.days, load_rates())
    return report.to_dict()

@app.post("/reports/recommendations", response_model=list[RecommendationResponse])
async def recommendations(req: ReportRequest):
    recs = generate_recommendations(req.to_jobs(), req.days, load_rates())
    return [r.to_dict() for r in recs]

@app.post("/reports/summary")
async def summary(req: ReportRequest) -> dict[str, Any]:
    return analyze(req.to_jobs(), req.days, load_rates()).to_dict()
