# api.py
import logging
import os
from functools import partial

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from drugcheck.config import configure_logging, load_settings
from drugcheck.errors import (
    AnalysisInProgressError,
    AuthError,
    DataFormatError,
    InteractionCheckError,
    RateLimitError,
    ServiceUnavailableError,
    UnknownProviderError,
    ValidationError,
)
from drugcheck.models import AddDrugRequest, AnalysisResult, CheckRequest, SessionView
from drugcheck.services import llm
from drugcheck.services.present import session_view
from drugcheck.services.session import Session
from drugcheck.ui import mount_ui

logger = logging.getLogger(__name__)

# ----------------------------
# Config
# ----------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

settings = load_settings()
client = llm.make_client(settings.openai_api_key)
if client is None:
    logger.warning("OPENAI_API_KEY is not set; analysis requests will fail with an auth error.")

STATUS_BY_ERROR = {
    ValidationError: 400,
    AuthError: 401,
    AnalysisInProgressError: 409,
    RateLimitError: 429,
    DataFormatError: 502,
    UnknownProviderError: 502,
    ServiceUnavailableError: 503,
}

# single in-memory session; nothing survives a restart
_session = Session(analyzer=partial(llm.analyze, client, model=settings.openai_model))


def get_session() -> Session:
    return _session


def get_client():
    return client


# ----------------------------
# FastAPI app
# ----------------------------
app = FastAPI(title="Drug Interaction Checker API", version="0.3.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

mount_ui(app, BASE_DIR, get_session)


@app.exception_handler(InteractionCheckError)
def interaction_error_handler(request: Request, exc: InteractionCheckError):
    status = STATUS_BY_ERROR.get(type(exc), 500)
    return JSONResponse(status_code=status, content={"detail": exc.message, "category": exc.category})


# ----------------------------
# Routes
# ----------------------------
@app.get("/")
def root():
    return {"message": "Drug Interaction Checker API is running"}


@app.get("/health")
def health():
    return {"ok": True, "llm_configured": client is not None}


@app.get("/session", response_model=SessionView)
def get_session_view(session: Session = Depends(get_session)):
    return session_view(session.state)


@app.post("/drugs", response_model=SessionView)
def add_drug(request: AddDrugRequest, session: Session = Depends(get_session)):
    return session_view(session.add(request.name))


@app.delete("/drugs/{drug_id}", response_model=SessionView)
def remove_drug(drug_id: str, session: Session = Depends(get_session)):
    return session_view(session.remove(drug_id))


@app.delete("/drugs", response_model=SessionView)
def clear_drugs(session: Session = Depends(get_session)):
    return session_view(session.clear())


@app.post("/analyze", response_model=SessionView)
def analyze(session: Session = Depends(get_session)):
    # failures land in the view's `error`; only the re-entrancy guard is an HTTP error
    return session_view(session.analyze())


@app.post("/retry", response_model=SessionView)
def retry(session: Session = Depends(get_session)):
    return session_view(session.retry())


@app.post("/check", response_model=AnalysisResult)
def check_interactions(request: CheckRequest, llm_client=Depends(get_client)):
    drugs = [d.strip() for d in request.drugs if d and d.strip()]
    return llm.analyze(llm_client, drugs, model=settings.openai_model)


# Local run
if __name__ == "__main__":
    import uvicorn
    configure_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
