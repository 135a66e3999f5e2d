# contract_service/app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.helpers.exception_handler import setup_exception_handlers
from .models import clients, contracts, interventions, notification_logs
from .router import admin_router, clients_router, contracts_router, interventions_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s]: %(message)s",
)

# Create all tables
Base.metadata.create_all(bind=engine)

# This MUST exist for uvicorn
app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(contracts_router.router)
app.include_router(interventions_router.router)
app.include_router(clients_router.router)
app.include_router(admin_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy", "version": settings.APP_VERSION}
