# src/backend/app.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException as FastAPIHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.backend.config import settings
from src.backend.middleware.security_headers import security_headers_middleware
from src.backend.routes.menus_api import router as menus_router
from src.backend.utils.database import init_models
from src.backend.utils.error_handler import custom_exception_handler
from src.backend.utils.errors import AppError
from src.backend.utils.log_config import configure_logging
from src.backend.utils.response import success

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_models()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, version="1.0", lifespan=lifespan)

# ----------------------------------------------------------
# CORS & SECURITY HEADERS
# ----------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(security_headers_middleware)

# ----------------------------------------------------------
# CUSTOM ERROR HANDLERS
# ----------------------------------------------------------
# 1) Domain errors raised from crud/routes
app.add_exception_handler(AppError, custom_exception_handler)

# 2) Starlette HTTPException (routing 404 etc.)
app.add_exception_handler(StarletteHTTPException, custom_exception_handler)

# 3) FastAPI HTTPException (ones you raise yourself)
app.add_exception_handler(FastAPIHTTPException, custom_exception_handler)

# 4) Validation errors
app.add_exception_handler(RequestValidationError, custom_exception_handler)

# 5) Catch-all
app.add_exception_handler(Exception, custom_exception_handler)

# ----------------------------------------------------------
# ROUTERS
# ----------------------------------------------------------
app.include_router(menus_router, prefix=settings.API_PREFIX)


@app.get("/health", include_in_schema=False)
async def health():
    return success("ok", {"app": settings.APP_NAME})
