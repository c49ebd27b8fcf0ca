from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from membership import models  # noqa: F401  (registers tables on Base.metadata)
from membership.config import get_settings
from membership.database import Base, engine
from membership.logging_middleware import add_audit_middleware, configure_app_logging
from membership.rate_limit import apply_rate_limiter

from .routers import accountability, auth, feedback, users

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    configure_app_logging()
    fastapi_app = FastAPI(
        title="Membership API",
        description="Members, supervisors and their feedback and accountability submissions",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, "membership")
    Instrumentator().instrument(fastapi_app).expose(fastapi_app, include_in_schema=False)

    fastapi_app.include_router(auth.router)
    fastapi_app.include_router(users.router)
    fastapi_app.include_router(accountability.router)
    fastapi_app.include_router(feedback.router)
    return fastapi_app


app = create_app()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "membership"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("services.api.app:app", host="0.0.0.0", port=settings.service_port)
