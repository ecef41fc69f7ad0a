"""Static text pages served next to the productos API."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["pages"], default_response_class=PlainTextResponse)


@router.get("/")
def root() -> str:
    return "Primera pantalla"


@router.get("/home")
def home() -> str:
    return "Pantalla dentro de HOME"


@router.get("/fav")
def favoritos() -> str:
    return "Pantalla de los FAVORITOS"
