import logging
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from promptpilot.auth import AuthContext, get_auth_context
from promptpilot.config import settings
from promptpilot.database import get_db, init_db
from promptpilot.dependencies import get_auth_client, get_llm_client, get_prompt_service
from promptpilot.errors import AppError
from promptpilot.llm.openrouter import OpenRouterClient
from promptpilot.logging import setup_logging
from promptpilot.prompts.recommendations import list_catalog
from promptpilot.prompts.schemas import (
    Category,
    GenerateRequest,
    GenerateResponse,
    ImproveRequest,
    ImproveResponse,
    InvokeRequest,
    InvokeResponse,
    ModelListResponse,
    PromptHistoryResponse,
    PromptResultResponse,
    RecommendRequest,
    RecommendResponse,
)
from promptpilot.prompts.service import PromptService
from promptpilot.users.confirmation import SupabaseAuthClient
from promptpilot.users.schemas import (
    ResendConfirmationRequest,
    ResendConfirmationResponse,
    WebhookResponse,
)
from promptpilot.users.webhooks import UserWebhookHandler, verify_webhook

setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    yield


app = FastAPI(title="PromptPilot", version="0.1.0", lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render schema violations as 400 with one entry per field."""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        details.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})

    logger.warning(f"Invalid request on {request.method} {request.url.path}: {details}")
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint - verifies DB connection."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception:
        raise HTTPException(status_code=503, detail="Database connection failed") from None


@app.post("/invoke", response_model=InvokeResponse)
def invoke_model(
    data: InvokeRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """Run a prompt against the requested model."""
    return service.invoke_model(auth.user_id, data)


@app.post("/model/recommend", response_model=RecommendResponse, response_model_exclude_none=True)
def recommend_model(
    data: RecommendRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """Recommend models for a prompt, classifying it unless a category is given."""
    return service.recommend_model(auth.user_id, data.prompt, data.category)


@app.post("/prompt/generate", response_model=GenerateResponse)
def generate_prompt(
    data: GenerateRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """Generate a prompt from a goal."""
    return service.generate_prompt(auth.user_id, data.goal, data.context)


@app.post("/prompt/improve", response_model=ImproveResponse)
def improve_prompt(
    data: ImproveRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """Improve an existing prompt."""
    return service.improve_prompt(auth.user_id, data.prompt, data.feedback)


@app.get("/prompt/result", response_model=PromptResultResponse)
def get_prompt_result(
    prompt_id: UUID = Query(alias="id"),
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """Get a stored interaction owned by the caller."""
    record = service.get_result(auth.user_id, prompt_id)
    return PromptResultResponse.model_validate(record)


@app.get("/prompt/history", response_model=PromptHistoryResponse)
def get_prompt_history(
    limit: int = Query(50, ge=1, le=200),
    auth: AuthContext = Depends(get_auth_context),
    service: PromptService = Depends(get_prompt_service),
):
    """List the caller's interactions, newest first."""
    records, total = service.list_history(auth.user_id, limit=limit)
    return PromptHistoryResponse(
        prompts=[PromptResultResponse.model_validate(r) for r in records],
        total=total,
    )


@app.get("/models", response_model=ModelListResponse)
def list_models(category: Category | None = None):
    """Static model catalog, optionally filtered by category."""
    models = list_catalog(category)
    return ModelListResponse(models=models, total=len(models))


@app.get("/models/available", response_model=ModelListResponse)
def list_available_models(
    auth: AuthContext = Depends(get_auth_context),
    llm: OpenRouterClient = Depends(get_llm_client),
):
    """Live model catalog from OpenRouter."""
    models = llm.get_available_models()
    return ModelListResponse(models=models, total=len(models))


@app.post("/webhook", response_model=WebhookResponse)
async def identity_webhook(request: Request, db: Session = Depends(get_db)):
    """Sync local users from signed identity-provider events."""
    payload = await request.body()
    event = verify_webhook(settings.clerk_webhook_secret, payload, dict(request.headers))
    await run_in_threadpool(UserWebhookHandler(db).handle, event)
    return WebhookResponse(status="ok")


@app.post("/auth/resend-confirmation", response_model=ResendConfirmationResponse)
def resend_confirmation(
    data: ResendConfirmationRequest,
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
):
    """Resend the signup confirmation email."""
    auth_client.resend_signup_confirmation(data.email)
    return ResendConfirmationResponse(success=True, message="Confirmation email sent successfully")
