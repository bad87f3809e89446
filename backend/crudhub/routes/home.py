"""
CrudHub Backend — Welcome Route
=================================

What:  GET / returns a greeting and the list of mounted resources.
Who:   The front-end's landing page renders `message`.
"""

from fastapi import APIRouter, Request

from crudhub.schemas.api import WelcomeResponse

router = APIRouter(tags=["Home"])


@router.get("/", response_model=WelcomeResponse, summary="Welcome message")
async def welcome(request: Request) -> WelcomeResponse:
    registry = request.app.state.registry
    return WelcomeResponse(
        message="Hello from CrudHub!",
        resources=registry.names,
    )
