from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """Liveness probe.

    Does not call the generation provider; it only confirms the process is
    serving and reports which model it was configured with.
    """
    return {"status": "ok", "model": request.app.state.settings.llm.model}
