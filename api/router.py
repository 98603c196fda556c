# api/router.py
from fastapi import APIRouter

from . import mensa

api_router = APIRouter()

api_router.include_router(mensa.router, prefix="/mensa", tags=["Mensa"])
