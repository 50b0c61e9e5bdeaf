import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from showpro.api.route import router
from showpro.config import CORS_ORIGINS, LOG_LEVEL
from showpro.errors import AuthRequiredError, ShowproError
from showpro.middleware.auth_context import auth_context_middleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ShowPro API",
    description="API multi-tenant para gerenciamento de eventos e landing pages",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _auth_context(request: Request, call_next):
    return await auth_context_middleware(request, call_next)


app.include_router(router)


def _error_payload(*, code: str, message: str, details: object | None = None) -> dict:
    payload: dict = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


@app.exception_handler(ShowproError)
async def showpro_exception_handler(request: Request, exc: ShowproError):
    headers = None
    if isinstance(exc, AuthRequiredError):
        # Cliente segue o Location para o login; o return_to vai na query.
        headers = {"Location": exc.redirect_to}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(code=exc.code, message=exc.message, details=exc.details),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Normaliza erros HTTP do FastAPI/Starlette para um payload consistente.
    code = f"HTTP_{exc.status_code}"
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(code=code, message=message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Normaliza erros de validação (422) para payload consistente.
    return JSONResponse(
        status_code=422,
        content=_error_payload(
            code="VALIDATION_ERROR",
            message="Invalid request",
            details=jsonable_encoder(exc.errors()),
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Erro não tratado em {request.method} {request.url.path}: {exc}", exc_info=True)
    # Sem stacktrace nem mensagem interna no payload.
    return JSONResponse(
        status_code=500,
        content=_error_payload(code="INTERNAL_ERROR", message="Internal server error"),
    )
