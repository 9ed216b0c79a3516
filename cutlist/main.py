"""
FastAPI backend for the cut list optimizer

Stateless REST API: every request carries its own parts, stock and options.
Run with: uvicorn cutlist.main:app --reload
"""

import logging
from typing import List

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .models import (
    ErrorResponse,
    OptimizationResult,
    OptimizeRequest,
    Strategy,
)
from .normalize import InputLimitError
from .optimizer import candidate_strategies, optimize_requests
from .settings import settings

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="2D guillotine cut list optimizer with blade kerf",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint"""
    return {
        "message": f"{settings.app_name} API v1.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "strategies": len(candidate_strategies())
    }


# ============================================================================
# OPTIMIZER ENDPOINTS
# ============================================================================

@app.get("/api/strategies", response_model=List[Strategy], tags=["Optimizer"])
async def list_strategies():
    """Candidate (sort order, split heuristic) pairs in evaluation order"""
    return list(candidate_strategies())


@app.post("/api/optimize", response_model=OptimizationResult, tags=["Optimizer"])
async def run_optimizer(request: OptimizeRequest):
    """
    Pack the requested parts onto the available stock

    - **parts**: part rows; each row is expanded into `quantity` unit parts
    - **stock**: stock sheet rows, expanded the same way
    - **config.kerf**: blade width removed at every cut

    Parts that fit on no sheet are returned in `unplaced`; that is not an error.
    """
    try:
        return await run_in_threadpool(
            optimize_requests,
            request.parts,
            request.stock,
            request.config,
            settings.max_units,
        )
    except InputLimitError as e:
        logger.warning("Rejected optimize request: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Render HTTP errors as ErrorResponse"""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            detail=str(exc)
        ).model_dump()
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
