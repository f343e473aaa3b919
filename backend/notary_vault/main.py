import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notary_vault.config import settings
from notary_vault.database import check_integrity, init_db
from notary_vault.errors import NotaryVaultError
from notary_vault.routers import customers, documents, files, search, verification
from notary_vault.utils.filesystem import ensure_vault_dirs

logger = logging.getLogger("notary_vault")


def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create the vault layout, apply the schema, integrity-check
    ensure_vault_dirs()
    init_db()
    result = check_integrity()
    if result == "ok":
        logger.info("Database integrity check passed.")
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    yield


app = FastAPI(
    title="Notary Vault",
    description="Notary office records: customers, notarized documents, parties and attachments",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotaryVaultError)
async def notary_vault_error_handler(request: Request, exc: NotaryVaultError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code, **exc.extra},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in errors
    )
    return JSONResponse(
        status_code=400,
        content={"detail": detail or "Invalid request.", "code": "VALIDATION_ERROR"},
    )


app.include_router(customers.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(files.router, prefix=settings.api_prefix)
app.include_router(search.router, prefix=settings.api_prefix)
app.include_router(verification.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}


def run():
    configure_logging()
    uvicorn.run("notary_vault.main:app", host=settings.host, port=settings.port)
