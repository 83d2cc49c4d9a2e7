"""
In-memory job API served with FastAPI.

Mirrors the remote contract: GET /status/{job_id} answers 200 with the
job's next scripted snapshot or 404 once the script is exhausted or the
job is unknown; POST /quests/{quest_id}/generate-steps schedules a job.
"""

import uuid
from collections import deque

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse


class FakeJobApi:
    """Scripted job backend; each status GET consumes one scripted payload."""

    def __init__(self) -> None:
        self.scripts: dict[str, deque] = {}
        self.auth_headers: list[str | None] = []
        self.app = self._build_app()

    def add_job(self, job_id: str, *payloads: dict | int) -> None:
        """Queue payloads for a job; an int queues an error status code."""
        self.scripts[job_id] = deque(payloads)

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="Fake Job API")

        @app.middleware("http")
        async def record_auth(request: Request, call_next):
            self.auth_headers.append(request.headers.get("authorization"))
            return await call_next(request)

        @app.get("/status/{job_id}")
        async def get_status(job_id: str):
            script = self.scripts.get(job_id)
            if not script:
                raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
            payload = script.popleft()
            if isinstance(payload, int):
                return JSONResponse(
                    status_code=payload,
                    content={"message": f"Backend error {payload}"},
                )
            return payload

        @app.get("/broken/{job_id}")
        async def broken(job_id: str):
            raise HTTPException(status_code=503, detail="Status store unavailable")

        @app.post("/quests/{quest_id}/generate-steps")
        async def generate_steps(quest_id: str):
            if quest_id == "missing":
                raise HTTPException(status_code=404, detail="Quest not found")
            job_id = f"gen-{uuid.uuid4().hex[:8]}"
            self.scripts[job_id] = deque(
                [{"status": "Processing", "percent": 50, "message": "Generating"}]
            )
            return {"isSuccess": True, "data": {"jobId": job_id}}

        return app
