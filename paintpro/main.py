import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .db import Base, engine, SessionLocal
from .i18n import resolve_locale, translate
from .logging import setup_logging, RequestIdMiddleware, structlog
from .schemas.decoding import PayloadValidationError, format_errors
from .auth.router import router as auth_router
from .routes.clients import router as clients_router
from .routes.projects import router as projects_router
from .routes.quotes import router as quotes_router
from .routes.service_orders import router as service_orders_router
from .routes.staff import router as staff_router
from .routes.subcontractors import router as subcontractors_router
from .routes.suppliers import router as suppliers_router
from .routes.invoices import router as invoices_router
from .routes.payments import router as payments_router
from .routes.purchase_orders import router as purchase_orders_router
from .routes.activities import router as activities_router
from .routes.reports import router as reports_router


def _locale(request: Request) -> str:
    return resolve_locale(request.headers.get("accept-language"))


async def payload_validation_handler(request: Request, exc: PayloadValidationError):
    return JSONResponse(status_code=400, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    locale = _locale(request)
    content = {
        "message": translate("error.invalid_payload", locale, entity=translate("entity.request", locale)),
        "errors": format_errors(exc.errors(), locale, skip_prefix=1),
    }
    return JSONResponse(status_code=400, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title=settings.app_name)

    # Middlewares
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Error bodies
    app.add_exception_handler(PayloadValidationError, payload_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(clients_router)
    app.include_router(projects_router)
    app.include_router(quotes_router)
    app.include_router(service_orders_router)
    app.include_router(staff_router)
    app.include_router(subcontractors_router)
    app.include_router(suppliers_router)
    app.include_router(invoices_router)
    app.include_router(payments_router)
    app.include_router(purchase_orders_router)
    app.include_router(activities_router)
    app.include_router(reports_router)

    # Metrics
    Instrumentator().instrument(app).expose(app)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "environment": settings.environment}

    @app.on_event("startup")
    def _startup():
        log = structlog.get_logger()
        # Ensure local SQLite directory exists
        if settings.database_url.startswith("sqlite:///./"):
            os.makedirs("var", exist_ok=True)
        if not settings.auto_create_db:
            log.info("startup_complete", auto_create_db=False)
            return
        Base.metadata.create_all(bind=engine)
        from .services.bootstrap import seed_initial_data
        db = SessionLocal()
        try:
            seeded = seed_initial_data(db)
        finally:
            db.close()
        log.info("startup_complete", auto_create_db=True, seeded=seeded)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("paintpro.main:app", host=settings.host, port=settings.port)
