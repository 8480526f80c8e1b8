"""
FastAPI application for the e-invoice validation gateway.

Endpoints
---------
- GET /health
- POST /validate                (raw XML body, default rulesets, JSON report)
- POST /validate/specific       (raw XML body, rulesets from the `rule` header)
- POST /validate/v2             (uploaded XML file, `format` header)
- POST /validate/specific/v1    (uploaded XML file, `rule` and `format` headers)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from fastapi import Depends, FastAPI, File, Header, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..checker import check
from ..client import ValidatorClient
from ..config import Settings, get_settings
from ..dispatcher import dispatch
from ..errors import GatewayError, MissingInvoice, UnsupportedMediaType
from ..normalizer import normalize
from ..renderer import parse_format, render_async
from ..rulesets import parse_rulesets
from ..schema import ReportFormat
from ..scratch import ScratchSpace

logger = logging.getLogger(__name__)

RAW_BODY_TYPES = {"application/xml", "text/xml", "text/plain"}
UPLOAD_TYPES = {"application/xml", "text/xml"}
DEFAULT_FILENAME = "invoice.xml"

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    scratch = get_scratch(get_settings())
    scratch.ensure()
    logger.info("Scratch storage at %s", scratch.root)
    yield
    scratch.sweep()


app = FastAPI(title="E-Invoice Validation Gateway", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Error-Message"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """
    Map gateway errors onto their status code and a JSON error envelope.
    """
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_envelope(),
        headers={"X-Error-Message": exc.message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal Server Error"}},
    )


# ---------------- Dependencies ----------------


def get_scratch(settings: Settings = Depends(get_settings)) -> ScratchSpace:
    return ScratchSpace(settings.scratch_dir)


async def get_validator_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[ValidatorClient]:
    async with ValidatorClient(settings) as client:
        yield client


# ---------------- Helpers ----------------


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";")[0].strip().lower()


async def _validate_and_render(
    invoice: Union[str, bytes],
    filename: str,
    rules: str,
    report_format: Optional[str],
    client: ValidatorClient,
    scratch: ScratchSpace,
) -> Response:
    """
    Shared pipeline: check, validate remotely, normalize, render, dispatch.
    """
    fmt = parse_format(report_format or ReportFormat.JSON.value)
    rulesets = parse_rulesets(rules)
    check(invoice)

    raw = await client.validate(invoice, filename, ",".join(rulesets))
    report = normalize(raw, rulesets)
    artifact = await render_async(report, fmt, filename, scratch)
    return dispatch(artifact, scratch)


async def _read_raw_body(request: Request) -> bytes:
    if _media_type(request.headers.get("content-type")) not in RAW_BODY_TYPES:
        raise UnsupportedMediaType(
            "Please input a xml file. Other file types are not accepted!"
        )
    return await request.body()


async def _read_upload(invoice: Optional[UploadFile]) -> bytes:
    if invoice is None:
        raise MissingInvoice("Please upload an xml file.")
    if _media_type(invoice.content_type) not in UPLOAD_TYPES:
        raise UnsupportedMediaType(
            "Please input a xml file. Other file types are not accepted!"
        )
    return await invoice.read()


# ---------------- Routes ----------------


@app.get("/health")
async def health() -> dict:
    """
    Simple health-check endpoint.
    """
    return {"status": "ok"}


@app.post("/validate")
async def validate(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: ValidatorClient = Depends(get_validator_client),
    scratch: ScratchSpace = Depends(get_scratch),
) -> Response:
    """
    Validate a raw XML invoice body against the default rulesets.
    """
    invoice = await _read_raw_body(request)
    return await _validate_and_render(
        invoice, DEFAULT_FILENAME, settings.default_ruleset, None, client, scratch
    )


@app.post("/validate/specific")
async def validate_specific(
    request: Request,
    rule: Optional[str] = Header(default=None),
    client: ValidatorClient = Depends(get_validator_client),
    scratch: ScratchSpace = Depends(get_scratch),
) -> Response:
    """
    Validate a raw XML invoice body against the rulesets named in `rule`.
    """
    invoice = await _read_raw_body(request)
    return await _validate_and_render(
        invoice, DEFAULT_FILENAME, rule, None, client, scratch
    )


@app.post("/validate/v2")
async def validate_upload(
    invoice: Optional[UploadFile] = File(default=None),
    report_format: Optional[str] = Header(default=None, alias="format"),
    settings: Settings = Depends(get_settings),
    client: ValidatorClient = Depends(get_validator_client),
    scratch: ScratchSpace = Depends(get_scratch),
) -> Response:
    """
    Validate an uploaded XML invoice against the default rulesets.
    """
    content = await _read_upload(invoice)
    return await _validate_and_render(
        content,
        invoice.filename or DEFAULT_FILENAME,
        settings.default_ruleset,
        report_format,
        client,
        scratch,
    )


@app.post("/validate/specific/v1")
async def validate_upload_specific(
    invoice: Optional[UploadFile] = File(default=None),
    rule: Optional[str] = Header(default=None),
    report_format: Optional[str] = Header(default=None, alias="format"),
    client: ValidatorClient = Depends(get_validator_client),
    scratch: ScratchSpace = Depends(get_scratch),
) -> Response:
    """
    Validate an uploaded XML invoice against the rulesets named in `rule`.
    """
    content = await _read_upload(invoice)
    return await _validate_and_render(
        content,
        invoice.filename or DEFAULT_FILENAME,
        rule,
        report_format,
        client,
        scratch,
    )


# For local development convenience:
#   uvicorn einvoice_gateway.api.main:app --reload
