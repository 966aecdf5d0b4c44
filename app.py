from __future__ import annotations
import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from schemas import AnalysisResult, ErrorResponse
from analysis.translator import handle_analysis

logging.basicConfig(level=logging.INFO)


app = FastAPI(title="Resume Analysis API (Gemini)")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # browser front-end calls from any host
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework errors in the same {"error": ...} shape as ours."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@app.api_route(
    "/api/getAnalysis",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=AnalysisResult,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid Request"},
        405: {"model": ErrorResponse, "description": "Method Not Allowed"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
        502: {"model": ErrorResponse, "description": "Gemini API Error"},
    },
)
async def get_analysis(request: Request):
    """Analyse a resume as jobs, critique or contacts."""
    body = await request.body()
    status_code, payload = await run_in_threadpool(handle_analysis, request.method, body)
    return JSONResponse(status_code=status_code, content=payload)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
