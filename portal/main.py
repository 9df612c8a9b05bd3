from dotenv import load_dotenv
load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.core.config import settings
from portal.core.logging_setup import setup_logging
from portal.db.session import engine, SessionLocal
from portal.db.base import Base
from portal.db import models  # noqa: F401 (ensures models are registered)
from portal.api.router import api_router
from portal.db.seed import seed_admin

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


#Create application instance
app = FastAPI(title="Member Portal API")


#configure CORS for the portal frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


#Create all database tables on application startup
Base.metadata.create_all(bind=engine)


#Seed initial admin account when the application starts
@app.on_event("startup")
def startup():
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
    logger.info("Member portal API started")


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


#Register all API routes under the main application
app.include_router(api_router)
