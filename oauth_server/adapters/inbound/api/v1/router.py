# oauth_server/adapters/inbound/api/v1/router.py

from fastapi import APIRouter

from oauth_server.adapters.inbound.api.v1.endpoints import oauth_endpoint

api_router = APIRouter()

api_router.include_router(oauth_endpoint.router, prefix="/oauth")
