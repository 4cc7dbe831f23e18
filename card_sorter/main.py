from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query, Response

from .config import SorterConfig, apply_collation_locale
from .errors import ParseError, ProcessingError, SortSpecError
from .logging_config import configure_logging
from .models import DatasetResponse, HealthResponse
from .pipeline import Variant
from .rules import CSV_MEDIA_TYPE
from .session import SortSession
from .sorting import SortSpec

config = SorterConfig.from_env()
configure_logging(config.log_level)
apply_collation_locale(config)

app = FastAPI(
    title="card-sorter",
    description="Clean, sort and export trading card inventory CSVs",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


def _parse_spec(sort: List[str]) -> SortSpec:
    try:
        return SortSpec.parse(sort)
    except SortSpecError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err


async def _load(file: UploadFile, variant: Variant, *, dynamic_typing=None) -> SortSession:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    session = SortSession(variant, max_sort_keys=config.max_sort_keys)
    try:
        session.load(raw, dynamic_typing=dynamic_typing)
    except ParseError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err
    except ProcessingError as err:
        raise HTTPException(status_code=500, detail=str(err)) from err
    return session


def _sort(session: SortSession, spec: Optional[SortSpec] = None) -> None:
    try:
        if spec is not None:
            session.set_spec(spec)
        session.sort()
    except SortSpecError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err
    except ProcessingError as err:
        raise HTTPException(status_code=500, detail=str(err)) from err


def _preview(session: SortSession, filename: str) -> dict:
    parsed = session.parsed
    dataset = session.sorted if session.sorted is not None else parsed.dataset
    return {
        "filename": filename,
        "variant": session.variant.value,
        "encoding": parsed.encoding,
        "delimiter": parsed.delimiter,
        "columns": dataset.columns,
        "rows": dataset.records,
        "sort": list(session.spec.keys),
        "downloadable": session.downloadable,
        "summary": {
            "rows": len(dataset),
            "columns": len(dataset.columns),
            "filtered_out": parsed.filtered_out,
            "warnings": len(parsed.warnings),
        },
        "warnings": [w.as_dict() for w in parsed.warnings],
    }


def _download(session: SortSession) -> Response:
    content = session.export()
    if content is None:
        return Response(status_code=204)
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{session.filename}"'},
    )


@app.post("/sort", response_model=DatasetResponse)
async def sort_csv(
    file: UploadFile = File(...),
    sort: List[str] = Query(default=[]),
    dynamic_typing: bool = True,
):
    spec = _parse_spec(sort)
    session = await _load(file, Variant.GENERIC, dynamic_typing=dynamic_typing)
    _sort(session, spec)
    return _preview(session, file.filename)


@app.post("/sort/download")
async def download_sorted_csv(
    file: UploadFile = File(...),
    sort: List[str] = Query(default=[]),
    dynamic_typing: bool = True,
):
    spec = _parse_spec(sort)
    session = await _load(file, Variant.GENERIC, dynamic_typing=dynamic_typing)
    _sort(session, spec)
    return _download(session)


@app.post("/cards", response_model=DatasetResponse)
async def sort_cards_csv(file: UploadFile = File(...)):
    session = await _load(file, Variant.CARDS)
    _sort(session)
    return _preview(session, file.filename)


@app.post("/cards/download")
async def download_sorted_cards(file: UploadFile = File(...)):
    session = await _load(file, Variant.CARDS)
    _sort(session)
    return _download(session)
