import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from auth import router as auth_router
from content import router as content_router
from core import config
from core.db import Database
from core.errors import ConflictError, ContentError
from uploads import router as uploads_router
from uploads import service as uploads_service


def configure_logging() -> None:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to services via app.state.
    configure_logging()
    uploads_service.ensure_upload_dir()
    app.state.db = Database()
    await app.state.db.connect()
    try:
        yield
    finally:
        await app.state.db.close()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContentError)
async def content_error_handler(_: Request, exc: ContentError) -> JSONResponse:
    body: dict = {"detail": str(exc)}
    if isinstance(exc, ConflictError) and exc.constraint:
        body["constraint"] = exc.constraint
    if exc.internal_detail and config.expose_storage_errors():
        body["storage_detail"] = exc.internal_detail
    return JSONResponse(status_code=exc.status_code, content=body)


app.include_router(auth_router.router, tags=["auth"])
app.include_router(uploads_router.router, tags=["uploads"])
app.include_router(content_router.site_router, tags=["site"])
for resource_router in content_router.resource_routers:
    app.include_router(resource_router, tags=["content"])

app.mount(
    uploads_service.PUBLIC_PREFIX,
    StaticFiles(directory=config.upload_dir(), check_dir=False),
    name="uploads",
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "website content api"}
