"""
Dental AI - FastAPI Application

Thin HTTP host around the analysis pipeline:
- Full photo analysis
- Real-time quality feedback for camera previews
- Condition and product reference data
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from dental_ai import __version__
from dental_ai.config import PipelineConfig
from dental_ai.core.models import Condition, UserContext
from dental_ai.core.pipeline import AnalysisOrchestrator
from dental_ai.core.recommendations import RecommendationEngine
from dental_ai.core.validation import QualityGate
from dental_ai.utils import get_logger, DentalAnalysisError, ErrorKind

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str


class QualityResponse(BaseModel):
    poor: bool
    issues: List[str]
    score: int
    suggestions: List[str]


# Error kind -> HTTP status; anything unlisted is a 500
ERROR_STATUS_CODES: Dict[str, int] = {
    ErrorKind.INVALID_IMAGE.value: 422,
    ErrorKind.LOW_QUALITY_IMAGE.value: 422,
    ErrorKind.PROCESSING_TIMEOUT.value: 504,
}


# ---- Pipeline Singleton ----
_config = PipelineConfig()
_orchestrator = AnalysisOrchestrator(config=_config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.orchestrator = _orchestrator
    logger.info(f"Dental AI API v{__version__} ready to accept requests")
    yield
    logger.info("Dental AI API shut down.")


app = FastAPI(
    title="Dental AI API",
    description="Photo-based dental health analysis: conditions, severity, confidence and recommendations",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Utility Functions ----

def _error_response(error: DentalAnalysisError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(error.code, 500)
    return JSONResponse(status_code=status_code, content=error.to_dict())


async def _read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    if len(data) > _config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Upload exceeds {_config.max_upload_bytes} bytes",
        )
    return data


# ---- Endpoints ----

@app.get("/", response_model=HealthResponse)
async def root():
    return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now().isoformat())


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now().isoformat())


@app.post("/api/v1/analyze")
async def analyze(file: UploadFile = File(...), age: Optional[int] = Form(None)):
    """Analyze a dental photo; optional age enables personalized recommendations."""
    data = await _read_upload(file)
    context = UserContext(age=age) if age is not None else None

    outcome = await run_in_threadpool(_orchestrator.analyze, data, None, context)
    if not outcome.ok:
        return _error_response(outcome.error)

    response: Dict[str, Any] = outcome.result.to_dict()
    response["image_quality"] = outcome.quality.to_dict() if outcome.quality else None
    return response


@app.post("/api/v1/quality/realtime", response_model=QualityResponse)
async def realtime_quality(file: UploadFile = File(...)):
    """Loose-threshold quality check for live camera feedback."""
    data = await _read_upload(file)
    try:
        quality = await run_in_threadpool(_orchestrator.assess_realtime, data)
    except DentalAnalysisError as e:
        return _error_response(e)

    return QualityResponse(
        poor=quality.poor,
        issues=list(quality.issues),
        score=quality.score,
        suggestions=QualityGate.suggestions(quality),
    )


@app.get("/api/v1/conditions")
async def list_conditions():
    return {"conditions": [c.to_dict() for c in Condition]}


@app.get("/api/v1/products/comparison")
async def product_comparison():
    return {"products": [p.to_dict() for p in RecommendationEngine.product_comparison()]}


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
