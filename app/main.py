from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.applications.router import router as applications_router
from app.api.v1.fee_ledger.router import router as fee_ledger_router
from app.api.v1.fee_structures.router import router as fee_structures_router
from app.api.v1.student_fees.router import router as student_fees_router
from app.core.config import settings
from app.core.logging import setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Fee Ledger Service")

    # CORS: allow the admin console to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(fee_structures_router)
    app.include_router(student_fees_router)
    app.include_router(fee_ledger_router)
    app.include_router(applications_router)

    return app


app = create_app()
