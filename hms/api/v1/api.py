"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from hms.api.v1.endpoints import (auth, beds, doctors, facilities, health,
                                  hospitals, patients, users)

api_router = APIRouter()

# Auth (register, login, refresh, logout, password)
api_router.include_router(auth.router)

# User administration
api_router.include_router(users.router)

# Hospital resources
api_router.include_router(hospitals.router)
api_router.include_router(facilities.router)
api_router.include_router(doctors.router)
api_router.include_router(patients.router)
api_router.include_router(beds.router)

# Health
api_router.include_router(health.router)
