import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from fastapi import (
    Cookie,
    Depends,
    FastAPI,
    File,
    Form,
    Request,
    Response,
    UploadFile,
)
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .config import settings
from .errors import (
    EmptyWordListError,
    InvalidOptionError,
    NoCardPresentedError,
    NoWordsAvailableError,
    SessionError,
)
from .models import AnswerFeedback
from .progress import ProgressTracker, compute_summary, word_reports
from .session import SessionEngine
from .storage import USERNAME_KEY, KeyValueStore, get_default_store
from .vocabulary import VocabularyManager, read_word_file


# --- Logging Setup ---
def setup_logging():
    logger = logging.getLogger("vocabuilder")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return

    os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)


setup_logging()
logger = logging.getLogger(__name__)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    words = read_word_file(settings.DEFAULT_WORDS_FILE)
    if not words:
        logger.warning(f"Default word list {settings.DEFAULT_WORDS_FILE} is empty.")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")
templates = Jinja2Templates(directory=settings.TEMPLATE_DIR)


# --- Dependencies ---
def get_store() -> KeyValueStore:
    return get_default_store()


def get_vocabulary(store: KeyValueStore = Depends(get_store)) -> VocabularyManager:
    return VocabularyManager(store, settings.DEFAULT_WORDS_FILE)


def get_tracker(store: KeyValueStore = Depends(get_store)) -> ProgressTracker:
    return ProgressTracker(store)


def get_engine(
    store: KeyValueStore = Depends(get_store),
    vocabulary: VocabularyManager = Depends(get_vocabulary),
    tracker: ProgressTracker = Depends(get_tracker),
) -> SessionEngine:
    return SessionEngine(store, vocabulary, tracker)


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return session_id


def is_admin(
    admin: Optional[str] = Cookie(None, alias=settings.ADMIN_COOKIE_NAME),
) -> bool:
    return admin == "1"


def check_admin_password(password: str) -> bool:
    """Plaintext comparison against the shared admin secret.

    This is a convenience gate for a single classroom browser. It is not a
    security boundary: the secret ships in configuration and the cookie it
    sets can be forged.
    """
    return password == settings.ADMIN_PASSWORD


# --- Routes: Learner ---
@app.get("/", response_class=HTMLResponse)
def home(request: Request, store: KeyValueStore = Depends(get_store)):
    return templates.TemplateResponse(
        request, "start.html", {"username": store.get(USERNAME_KEY) or ""}
    )


@app.post("/start")
def start_session(
    request: Request,
    username: str = Form(""),
    engine: SessionEngine = Depends(get_engine),
):
    try:
        session_id = engine.start(username)
    except NoWordsAvailableError as e:
        logger.warning(f"Session not started: {e}")
        return templates.TemplateResponse(
            request, "no_words.html", {"message": str(e)}, status_code=503
        )

    redirect = RedirectResponse(url="/flashcards", status_code=302)
    redirect.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="Lax",
    )
    return redirect


@app.get("/flashcards", response_class=HTMLResponse)
def flashcards_page(request: Request, session_id: Optional[str] = Depends(get_session_id)):
    if not session_id:
        return RedirectResponse(url="/", status_code=302)
    return templates.TemplateResponse(request, "flashcards.html", {})


@app.get("/api/card")
def get_card(
    session_id: Optional[str] = Depends(get_session_id),
    engine: SessionEngine = Depends(get_engine),
):
    try:
        card, left = engine.current(session_id)
    except SessionError as e:
        return JSONResponse({"error": str(e)}, status_code=401)
    return {"word": card.entry.word, "options": card.options, "remaining": left}


@app.post("/api/answer", response_model=AnswerFeedback)
def answer_card(
    response: Response,
    selected: str = Form(""),
    session_id: Optional[str] = Depends(get_session_id),
    engine: SessionEngine = Depends(get_engine),
):
    try:
        feedback = engine.answer(session_id, selected)
    except (NoCardPresentedError, InvalidOptionError) as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except SessionError as e:
        return JSONResponse({"error": str(e)}, status_code=401)

    if feedback.complete:
        response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return feedback


@app.post("/api/reset")
def reset_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    engine: SessionEngine = Depends(get_engine),
):
    engine.abandon(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}


@app.get("/api/dashboard")
def get_dashboard_data(
    store: KeyValueStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
):
    username = store.get(USERNAME_KEY) or ""
    user_progress = tracker.user_progress(username) if username else {}
    return {
        "username": username,
        "summary": compute_summary(user_progress),
        "words": word_reports(user_progress),
    }


@app.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, data: dict = Depends(get_dashboard_data)):
    return templates.TemplateResponse(request, "dashboard.html", data)


# --- Routes: Admin ---
@app.get("/admin", response_class=HTMLResponse)
def admin_page(
    request: Request,
    admin: bool = Depends(is_admin),
    vocabulary: VocabularyManager = Depends(get_vocabulary),
    tracker: ProgressTracker = Depends(get_tracker),
):
    context = {"admin": admin}
    if admin:
        context.update(
            students=tracker.student_reports(),
            source=vocabulary.source(),
            word_count=len(vocabulary.load_words()),
        )
    return templates.TemplateResponse(request, "admin.html", context)


@app.post("/admin/login")
def admin_login(request: Request, password: str = Form("")):
    if not check_admin_password(password):
        logger.warning("Rejected admin login")
        return templates.TemplateResponse(
            request,
            "admin.html",
            {"admin": False, "error": "Incorrect password"},
            status_code=403,
        )
    redirect = RedirectResponse(url="/admin", status_code=302)
    redirect.set_cookie(key=settings.ADMIN_COOKIE_NAME, value="1", samesite="Lax")
    return redirect


@app.post("/admin/upload")
def upload_words(
    file: UploadFile = File(...),
    admin: bool = Depends(is_admin),
    vocabulary: VocabularyManager = Depends(get_vocabulary),
):
    if not admin:
        return JSONResponse({"error": "Admin login required"}, status_code=403)
    try:
        text = file.file.read().decode("utf-8-sig")
        words = vocabulary.upload(text)
    except UnicodeDecodeError:
        return JSONResponse({"error": "CSV file must be UTF-8 text."}, status_code=400)
    except EmptyWordListError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return {"status": "success", "count": len(words)}


@app.post("/admin/reset")
def reset_words(
    admin: bool = Depends(is_admin),
    vocabulary: VocabularyManager = Depends(get_vocabulary),
):
    if not admin:
        return JSONResponse({"error": "Admin login required"}, status_code=403)
    vocabulary.reset()
    return {"status": "success"}


@app.get("/api/admin/progress")
def get_admin_progress(
    admin: bool = Depends(is_admin),
    tracker: ProgressTracker = Depends(get_tracker),
):
    if not admin:
        return JSONResponse({"error": "Admin login required"}, status_code=403)
    return tracker.student_reports()


# --- Offline Support ---
@app.get("/service-worker.js")
def service_worker(request: Request):
    return templates.TemplateResponse(
        request,
        "service-worker.js",
        {"cache_name": settings.CACHE_NAME, "urls": settings.PRECACHE_URLS},
        media_type="application/javascript",
    )


if __name__ == "__main__":
    uvicorn.run("vocabuilder.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
