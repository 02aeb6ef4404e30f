from fastapi import APIRouter

from clm.api.routers import contracts

api_router = APIRouter()

api_router.include_router(contracts.router)
