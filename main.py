"""
Main application module for House Paint Preview.
"""
import time
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from paint_preview.api.deps import get_image_edit_client
from paint_preview.api.v1.api import api_router
from paint_preview.core.config import settings
from paint_preview.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} application")
    yield
    await get_image_edit_client().close()
    logger.info(f"Shutting down {settings.PROJECT_NAME} application")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for previewing a house photo repainted in a Sherwin-Williams color",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all requests and responses.
    """
    start_time = time.time()

    client_host = request.client.host if request.client else "unknown"
    request_path = request.url.path
    request_method = request.method

    logger.info(f"Request: {request_method} {request_path} from {client_host}")

    try:
        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {request_method} {request_path} - Status: {response.status_code} - "
            f"Completed in {process_time:.4f}s"
        )

        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Error processing {request_method} {request_path} - "
            f"Error: {str(e)} - Took {process_time:.4f}s"
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error. Please try again later."}
        )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to log all unhandled exceptions.
    """
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. Please try again later."}
    )


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    """
    Root endpoint.
    """
    logger.info("Root endpoint called")
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "docs": "/docs",
        "palette": f"{settings.API_V1_STR}/palette",
    }

if __name__ == "__main__":
    logger.info("Starting development server")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
