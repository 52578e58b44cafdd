"""API v1 router aggregating all endpoint routers.

Routes are mounted under ``api.prefix`` (empty by default, since the
frontend calls ``/r/...``, ``/i/...`` and ``/login`` directly).
"""

from __future__ import annotations

from fastapi import APIRouter

from recipes_api.api.v1.endpoints import auth, health, ingredients, recipes, search, users


router = APIRouter()

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(recipes.router)
router.include_router(ingredients.router)
router.include_router(search.router)
