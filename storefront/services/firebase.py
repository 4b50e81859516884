# storefront/services/firebase.py
from __future__ import annotations

import logging
import os
import threading
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore

from ..settings import settings

log = logging.getLogger(__name__)

_init_lock = threading.Lock()


def _firebase_app() -> firebase_admin.App:
    """
    The default Firebase app, created on first use.

    Uses a service-account file when GOOGLE_APPLICATION_CREDENTIALS points at
    one, application default credentials otherwise.
    """
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            return _initialize_app()


def _initialize_app() -> firebase_admin.App:
    sa_path = settings.google_application_credentials or os.environ.get(
        "GOOGLE_APPLICATION_CREDENTIALS"
    )
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    if sa_path and os.path.isfile(sa_path):
        log.info("initializing Firebase with service account %s", sa_path)
        return firebase_admin.initialize_app(credentials.Certificate(sa_path), options)
    log.info("initializing Firebase with application default credentials")
    return firebase_admin.initialize_app(options=options)


@lru_cache
def ensure_firestore() -> firestore.Client:
    """Return the shared Firestore client."""
    return firestore.client(app=_firebase_app())
