# storefront/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import orders as orders_router
from .services.firebase import ensure_firestore
from .settings import settings
from .utils.logger import setup_logger

setup_logger(settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(orders_router.router)

@app.get("/")
def root():
    return {"message": "Server is running!"}

@app.on_event("startup")
def _startup_ping_firestore():
    try:
        # one-document read as a connectivity ping
        ensure_firestore().collection(settings.products_collection).limit(1).get()
        log.info("[startup] connected to Firestore.")
    except Exception as e:
        # Keep serving; requests will surface the store error themselves
        log.warning("[startup] Firestore unavailable: %s", e)
