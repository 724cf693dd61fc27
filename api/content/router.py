"""
Content API endpoints.

Every collection resource gets the same five routes from `build_resource_router`;
the contact page and the site menu are wired by hand.
"""

# No postponed annotations here: route signatures close over `fields_model`.
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from auth import dependencies as auth_dependencies
from auth.schemas import Principal
from core.db import Database, get_database

from . import schemas, service
from .compiler import PatchStatus
from .resources import COLLECTIONS, ResourceSpec


def build_resource_router(spec: ResourceSpec) -> APIRouter:
    router = APIRouter(prefix=f"/api/{spec.path}")
    fields_model = spec.fields_model

    def get_service(db: Database = Depends(get_database)) -> service.ResourceService:
        return service.ResourceService(db, spec)

    @router.get("")
    async def list_records(svc: service.ResourceService = Depends(get_service)) -> list[dict]:
        return await svc.list()

    @router.get("/{record_id}")
    async def get_record(
        record_id: int,
        svc: service.ResourceService = Depends(get_service),
    ) -> dict:
        return await svc.get(record_id)

    @router.post("")
    async def create_record(
        payload: fields_model = Body(...),  # type: ignore[valid-type]
        svc: service.ResourceService = Depends(get_service),
        _: Principal = Depends(auth_dependencies.require_admin),
    ) -> dict:
        return await svc.create(payload.to_payload())

    @router.patch("/{record_id}")
    async def update_record(
        record_id: int,
        payload: fields_model = Body(...),  # type: ignore[valid-type]
        svc: service.ResourceService = Depends(get_service),
        _: Principal = Depends(auth_dependencies.require_admin),
    ) -> Any:
        result = await svc.update(record_id, payload.to_payload())
        if result.status is PatchStatus.NO_CHANGE:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return result.record

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: int,
        svc: service.ResourceService = Depends(get_service),
        _: Principal = Depends(auth_dependencies.require_admin),
    ) -> dict:
        await svc.delete(record_id)
        return {"message": "Deleted"}

    return router


site_router = APIRouter(prefix="/api/site")


@site_router.get("/menu")
async def site_menu(db: Database = Depends(get_database)) -> dict:
    return await service.site_menu(db)


@site_router.get("/contact")
async def get_contact_page(db: Database = Depends(get_database)) -> dict:
    data = await service.ContactService(db).get()
    return {"data": data}


@site_router.put("/contact")
async def put_contact_page(
    request: schemas.ContactPutRequest,
    db: Database = Depends(get_database),
    _: Principal = Depends(auth_dependencies.require_admin),
) -> dict:
    data = await service.ContactService(db).put(request.data.model_dump())
    return {"data": data}


resource_routers = [build_resource_router(spec) for spec in COLLECTIONS]
