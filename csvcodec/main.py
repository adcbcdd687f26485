import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Query, Response, UploadFile
from pydantic import ValidationError

from .codec import CsvParseError, generate, parse
from .log_config import setup_logging
from .models import CsvOptions, GenerateRequest, HealthResponse, ParseResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Leave logging alone when the host already configured the package logger
    if not logging.getLogger("csvcodec").handlers:
        setup_logging()
    yield


app = FastAPI(
    title="csvcodec",
    description="Configurable CSV parsing and generation",
    version="1.0.1",
    lifespan=lifespan,
)


def _build_options(**values) -> CsvOptions:
    try:
        return CsvOptions.build({k: v for k, v in values.items() if v is not None})
    except ValidationError as exc:
        logger.warning("rejected options %s: %s", values, exc)
        raise HTTPException(status_code=422, detail=[err["msg"] for err in exc.errors()])


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/parse", response_model=ParseResponse)
async def parse_csv(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(default=None),
    quote_char: Optional[str] = Query(default=None),
    has_header: Optional[bool] = Query(default=None),
    strict: Optional[bool] = Query(default=None),
):
    if not file.filename or not file.filename.lower().endswith(".csv"):
        logger.warning("rejected %s: not a .csv file", file.filename)
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    options = _build_options(
        delimiter=delimiter, quote_char=quote_char, has_header=has_header, strict=strict
    )

    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("rejected %s: not valid UTF-8", file.filename)
        raise HTTPException(status_code=422, detail="CSV must be UTF-8 encoded")

    try:
        rows = parse(text, options)
    except CsvParseError as exc:
        logger.warning("rejected %s: %s", file.filename, exc)
        raise HTTPException(
            status_code=422,
            detail={"error": str(exc), "line": exc.line, "column": exc.column},
        )

    return {"rows": rows, "row_count": len(rows), "has_header": options.has_header}


@app.post("/generate")
def generate_csv(request: GenerateRequest):
    options = _build_options(**request.options)
    body = generate(request.rows, options)
    return Response(content=body, media_type="text/csv")
