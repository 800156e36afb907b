import io
import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, File as FastAPIFile, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse

import database
from blobstore import BlobStore, get_blob_store
from errors import DataUnavailable, InvalidPeriod, RecordNotFound
from recap import MonthPeriod, RecapAggregator
from reports import render
from schemas import (
    Activity,
    ActivityOut,
    DeleteResult,
    FileOut,
    Finance,
    FinanceOut,
    RecapResponse,
    ReportFormat,
)
from settings import get_settings
from store import RecordStore, get_activity_store, get_finance_store
from summary import get_summarizer

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Monthly Report API", version="0.2.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidPeriod)
async def invalid_period_handler(request: Request, exc: InvalidPeriod):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(RecordNotFound)
async def not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DataUnavailable)
async def unavailable_handler(request: Request, exc: DataUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def get_aggregator(
    activities: RecordStore = Depends(get_activity_store),
    finances: RecordStore = Depends(get_finance_store),
    summarizer=Depends(get_summarizer),
) -> RecapAggregator:
    return RecapAggregator(activities, finances, summarizer)


# Health
@app.get("/test")
def test():
    return {"status": "ok"}


@app.get("/health/db")
def db_health_check():
    try:
        database.ping()
        return {"status": "healthy", "database": "connected"}
    except DataUnavailable as e:
        return {"status": "unhealthy", "database": str(e)}


# Evidence files
@app.post("/files", response_model=FileOut)
async def upload_file(file: UploadFile = FastAPIFile(...), blobs: BlobStore = Depends(get_blob_store)):
    contents = await file.read()
    return blobs.upload(file.filename or "upload", file.content_type, contents)


@app.get("/files/{file_id}")
def get_file(file_id: str, blobs: BlobStore = Depends(get_blob_store)):
    doc, path = blobs.open(file_id)
    return FileResponse(path, media_type=doc.get("content_type"), filename=doc.get("filename"))


# Activities CRUD
@app.post("/activities", response_model=ActivityOut)
def create_activity(payload: Activity, store: RecordStore = Depends(get_activity_store)):
    return store.create(payload.model_dump())


@app.get("/activities", response_model=List[ActivityOut])
def list_activities(month: int, year: int, q: Optional[str] = None, store: RecordStore = Depends(get_activity_store)):
    return store.list(MonthPeriod(month, year), search=q)


@app.put("/activities/{id}", response_model=ActivityOut)
def update_activity(id: str, payload: Activity, store: RecordStore = Depends(get_activity_store)):
    return store.update(id, payload.model_dump())


@app.delete("/activities/{id}", response_model=DeleteResult)
def remove_activity(id: str, store: RecordStore = Depends(get_activity_store)):
    return {"success": store.delete(id)}


# Finances CRUD
@app.post("/finances", response_model=FinanceOut)
def create_finance(payload: Finance, store: RecordStore = Depends(get_finance_store)):
    return store.create(payload.model_dump())


@app.get("/finances", response_model=List[FinanceOut])
def list_finances(month: int, year: int, q: Optional[str] = None, store: RecordStore = Depends(get_finance_store)):
    return store.list(MonthPeriod(month, year), search=q)


@app.put("/finances/{id}", response_model=FinanceOut)
def update_finance(id: str, payload: Finance, store: RecordStore = Depends(get_finance_store)):
    return store.update(id, payload.model_dump())


@app.delete("/finances/{id}", response_model=DeleteResult)
def remove_finance(id: str, store: RecordStore = Depends(get_finance_store)):
    return {"success": store.delete(id)}


# Aggregate endpoints
@app.get("/recap", response_model=RecapResponse)
async def monthly_recap(month: int, year: int, aggregator: RecapAggregator = Depends(get_aggregator)):
    return await aggregator.recap(month, year)


@app.get("/export/{fmt}")
async def export_report(fmt: ReportFormat, month: int, year: int, aggregator: RecapAggregator = Depends(get_aggregator)):
    period = MonthPeriod(month, year)
    acts, fins = await aggregator.load(period)
    recap = await aggregator.recap_from(period, acts, fins)
    report = render(fmt, recap, acts, fins)
    return StreamingResponse(
        io.BytesIO(report.content),
        media_type=report.media_type,
        headers={"Content-Disposition": f"attachment; filename={report.filename}"},
    )
