import logging
import os
from dotenv import load_dotenv
from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from models import (
    AggregateResult, AnalyzeRequest, BenchmarkRequest, CompletenessReport, CompletenessRequest,
    DocumentAnalysis, DocumentInsights, EntitiesRequest, EntityBundle, InsightsRequest,
    SuggestionBundle, SuggestRequest, ValidateRequest, ValidationBundle,
)
from rules_catalog import CatalogError
from analyzer import DEFAULT_ENGINE, DEFAULT_SUGGESTER, analyze_document, analyze_pdf_bytes
from insights import assess_completeness, document_insights
from prompts import DEFAULT_INDUSTRY

load_dotenv()

# ── configurable via .env ──
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "deepseek-r1")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Compliance Benchmarking Analyzer", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.error("Rule catalogue failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "analysis engine internal failure"})


@app.get("/health")
async def health():
    return {"status": "ok", "ollama_model": OLLAMA_MODEL}


@app.get("/frameworks")
async def list_frameworks():
    catalog = DEFAULT_ENGINE.catalog
    return {
        "frameworks": [
            {"id": rs.framework_id, "name": rs.name, "region": rs.region, "rules": len(rs.rules)}
            for rs in catalog.frameworks.values()
        ],
        "industries": list(catalog.benchmarks),
    }


@app.post("/benchmark", response_model=AggregateResult)
def benchmark(req: BenchmarkRequest):
    return DEFAULT_ENGINE.perform_comprehensive_benchmarking(req.text, req.frameworks, req.industry, req.top_n)


@app.post("/entities", response_model=EntityBundle)
def entities(req: EntitiesRequest):
    try:
        return DEFAULT_SUGGESTER.extractor.extract_entities(req.text, req.options)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/frameworks/suggest", response_model=SuggestionBundle)
def suggest(req: SuggestRequest):
    return DEFAULT_SUGGESTER.suggest_frameworks(req.text, req.options)


@app.post("/frameworks/validate", response_model=ValidationBundle)
def validate(req: ValidateRequest):
    return DEFAULT_SUGGESTER.validate_frameworks(req.frameworks, req.text)


@app.post("/insights", response_model=DocumentInsights)
def insights(req: InsightsRequest):
    return document_insights(DEFAULT_SUGGESTER.extractor.extract_entities(req.text))


@app.post("/completeness", response_model=CompletenessReport)
def completeness(req: CompletenessRequest):
    entities = DEFAULT_SUGGESTER.extractor.extract_entities(req.text)
    validation = DEFAULT_SUGGESTER.validate_frameworks(req.frameworks, req.text)
    return assess_completeness(entities, validation, req.frameworks)


@app.post("/analyze", response_model=DocumentAnalysis)
def analyze(req: AnalyzeRequest):
    return analyze_document(req.text, req.frameworks, req.industry, summarize=req.summarize)


@app.post("/analyze/pdf", response_model=DocumentAnalysis)
async def analyze_pdf(
    file: UploadFile = File(...),
    frameworks: str | None = Form(None),
    industry: str = Form(DEFAULT_INDUSTRY),
    summarize: bool = Form(False),
):
    if not file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Please upload a PDF.")

    pdf_bytes = await file.read()
    selected = [f.strip() for f in frameworks.split(",") if f.strip()] if frameworks else None
    return await run_in_threadpool(analyze_pdf_bytes, pdf_bytes, selected, industry, summarize)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=API_PORT)
