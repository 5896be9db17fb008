"""API routes."""

from fastapi import APIRouter

from call_handler.api.routes import calls, justcall_webhooks

api_router = APIRouter()

# Provider webhooks
api_router.include_router(justcall_webhooks.router, prefix="/justcall", tags=["justcall-webhooks"])

# Call logs
api_router.include_router(calls.router, prefix="/calls", tags=["calls"])
