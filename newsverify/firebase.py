# newsverify/firebase.py
import logging
import os
from typing import NamedTuple, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore

from .errors import AuthError

logger = logging.getLogger(__name__)

_DB = None

def init_firebase(settings):
    """Initialise the default Firebase app once and return its Firestore client."""
    global _DB
    if _DB is not None:
        return _DB

    if not firebase_admin._apps:
        # Explicit key file first, then Application Default Credentials
        cred_path = settings.FIREBASE_CREDENTIALS or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        if cred_path:
            if not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase service account key not found: '{cred_path}'")
            cred = credentials.Certificate(cred_path)
        else:
            cred = credentials.ApplicationDefault()
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        firebase_admin.initialize_app(cred, options)
        logger.info("Firebase initialised (project=%s)", settings.FIREBASE_PROJECT_ID or "from credentials")

    _DB = firestore.client()
    return _DB

def get_db(settings):
    return init_firebase(settings)


class AuthUser(NamedTuple):
    id: str
    email: Optional[str] = None


class FirebaseAuthenticator:
    """Verify Firebase ID tokens sent as ``Authorization: Bearer <token>``."""

    def get_user(self, token: str) -> AuthUser:
        try:
            claims = auth.verify_id_token(token)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
            raise AuthError("Please provide a valid authentication token") from e
        return AuthUser(id=claims["uid"], email=claims.get("email"))
