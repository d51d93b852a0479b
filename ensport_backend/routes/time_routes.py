# ensport_backend/routes/time_routes.py
# Server clock for clients that must agree with the status evaluator

from fastapi import APIRouter, Depends

from ensport_backend.core.clock import get_clock, server_time_payload

router = APIRouter()


@router.get("/server-time")
async def server_time(clock=Depends(get_clock)):
    return server_time_payload(clock())
