# newsverify/main.py
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .ai import analyzer_from_settings
from .analyzer import NewsAnalyzer
from .config import Settings, settings
from .errors import AuthError, NewsVerifyError
from .extract import ContentExtractor
from .firebase import AuthUser, FirebaseAuthenticator, init_firebase
from .history import HistoryStore, store_from_settings, total_pages
from .models import (
    AnalysisOut, AnalyzeIn, AnalyzeOut, HistoryOut, HistoryPage, MessageOut,
    Pagination, PreviewOut, StatsOut,
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
for _name in ("urllib3", "httpx", "openai", "google", "firebase_admin"):
    logging.getLogger(_name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dependencies ---

def get_analyzer(request: Request) -> NewsAnalyzer:
    return request.app.state.analyzer

def get_store(request: Request) -> HistoryStore:
    return request.app.state.store

def _bearer_token(request: Request) -> Optional[str]:
    scheme, _, token = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

def current_user(request: Request) -> AuthUser:
    token = _bearer_token(request)
    if not token:
        raise AuthError("Access token required")
    authenticator = request.app.state.authenticator
    if authenticator is None:
        raise AuthError("Authentication is not configured")
    return authenticator.get_user(token)

def optional_user(request: Request) -> Optional[AuthUser]:
    token = _bearer_token(request)
    authenticator = request.app.state.authenticator
    if not token or authenticator is None:
        return None
    try:
        return authenticator.get_user(token)
    except AuthError as e:
        logger.warning("Ignoring invalid token on optional-auth route: %s", e)
        return None


# --- Error handlers ---

async def _app_error(request: Request, exc: NewsVerifyError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.title, "message": str(exc)})

async def _request_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg', 'invalid request')}" if where else first.get("msg", "invalid request")
    return JSONResponse(status_code=400, content={"error": "Validation failed", "message": message})

async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "An unexpected error occurred"},
    )


# --- Routes ---

@router.get("/health")
def health(request: Request):
    state = request.app.state
    return {"ok": True, "llm": state.analyzer.ai.enabled, "history": state.store.name}


@router.post("/news/analyze", response_model=AnalyzeOut)
def analyze_news(
    payload: AnalyzeIn = Body(...),
    analyzer: NewsAnalyzer = Depends(get_analyzer),
    user: Optional[AuthUser] = Depends(optional_user),
):
    """Score a URL or a block of text; signed-in users get it saved to history."""
    result = analyzer.analyze(
        url=payload.url,
        content=payload.content,
        user_id=user.id if user else None,
    )
    return {"message": "Analysis completed successfully", "analysis": result}


@router.get("/news/preview", response_model=PreviewOut)
def preview_news(url: Optional[str] = None, analyzer: NewsAnalyzer = Depends(get_analyzer)):
    return {"message": "News preview retrieved successfully", "preview": analyzer.preview(url)}


@router.get("/analysis/history", response_model=HistoryOut)
def analysis_history(
    page: int = 1,
    limit: int = 20,
    sort_by: str = Query("timestamp", alias="sortBy"),
    order: str = "desc",
    store: HistoryStore = Depends(get_store),
    user: AuthUser = Depends(current_user),
):
    records, total = store.list(user.id, page=page, limit=limit, sort_by=sort_by, order=order)
    return {
        "message": "Analysis history retrieved successfully",
        "data": HistoryPage(
            analyses=records,
            pagination=Pagination(page=page, limit=limit, total=total, total_pages=total_pages(total, limit)),
        ),
    }


@router.delete("/analysis/history", response_model=MessageOut)
def clear_history(store: HistoryStore = Depends(get_store), user: AuthUser = Depends(current_user)):
    deleted = store.delete_all(user.id)
    logger.info("Cleared %d analyses for user %s", deleted, user.id)
    return {"message": "Analysis history cleared successfully", "deleted": deleted}


@router.get("/analysis/stats/summary", response_model=StatsOut)
def analysis_stats(store: HistoryStore = Depends(get_store), user: AuthUser = Depends(current_user)):
    return {"message": "Analysis statistics retrieved successfully", "stats": store.stats(user.id)}


@router.get("/analysis/{id}", response_model=AnalysisOut)
def get_analysis(id: str, store: HistoryStore = Depends(get_store), user: AuthUser = Depends(current_user)):
    return {"message": "Analysis retrieved successfully", "analysis": store.get(user.id, id)}


@router.delete("/analysis/{id}", response_model=MessageOut, response_model_exclude_none=True)
def delete_analysis(id: str, store: HistoryStore = Depends(get_store), user: AuthUser = Depends(current_user)):
    store.delete(user.id, id)
    return {"message": "Analysis deleted successfully"}


def create_app(
    cfg: Settings = settings,
    analyzer: Optional[NewsAnalyzer] = None,
    store: Optional[HistoryStore] = None,
    authenticator=None,
) -> FastAPI:
    """Build the app and the services it shares across requests."""
    app = FastAPI(title="NewsVerify Backend (credibility scoring + analysis history)")

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = analyzer.store if analyzer is not None and analyzer.store is not None else store_from_settings(cfg)
    if analyzer is None:
        analyzer = NewsAnalyzer(ContentExtractor(timeout=cfg.FETCH_TIMEOUT), analyzer_from_settings(cfg), store)
    if authenticator is None and cfg.firebase_enabled:
        init_firebase(cfg)
        authenticator = FirebaseAuthenticator()
    if authenticator is None:
        logger.warning("Firebase is not configured; protected routes will answer 401")

    app.state.settings = cfg
    app.state.analyzer = analyzer
    app.state.store = store
    app.state.authenticator = authenticator

    app.add_exception_handler(NewsVerifyError, _app_error)
    app.add_exception_handler(RequestValidationError, _request_error)
    app.add_exception_handler(Exception, _unexpected_error)
    app.include_router(router)
    return app


app = create_app()
