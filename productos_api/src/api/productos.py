"""Productos API endpoints backed by the JSON product store."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import PlainTextResponse

from errors import NotFoundError
from store import ProductStore

router = APIRouter(prefix="/productos", tags=["productos"])


def get_store(request: Request) -> ProductStore:
    """Return the store owned by the running application."""

    return request.app.state.store


@router.get("", response_model=List[Any])
def list_productos(store: ProductStore = Depends(get_store)) -> List[Any]:
    """Return the whole product collection in insertion order."""

    return store.load_all()


@router.post("", response_class=PlainTextResponse)
def create_producto(
    producto: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
) -> str:
    """Append a product to the collection."""

    store.append(producto)
    return "Producto agregado"


@router.put("/{producto_id}", response_model=Dict[str, Any])
def update_producto(
    producto_id: str,
    cambios: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
) -> Dict[str, Any]:
    """Merge the request body into an existing product."""

    return store.update_by_id(producto_id, cambios)


@router.delete("/{producto_id}", response_class=PlainTextResponse)
def delete_producto(producto_id: str, store: ProductStore = Depends(get_store)) -> str:
    if not store.delete_by_id(producto_id):
        raise NotFoundError(f"Product {producto_id} not found")
    return "Producto eliminado"
