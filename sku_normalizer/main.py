import logging

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response

from .config import Settings, get_settings
from .export import CSV_MEDIA_TYPE, results_to_csv
from .models import HealthResponse, NormalizeRequest, NormalizeResponse
from .normalize import decode_text, normalize_lines, summarize
from .render import render_results_table
from .rules import ColorTable

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Deterministic SKU normalization: size, color and warnings per line",
    version="0.1.0",
)

UPLOAD_EXTENSIONS = (".csv", ".txt")


def get_color_table(settings: Settings = Depends(get_settings)) -> ColorTable:
    return settings.color_table()


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/normalize", response_model=NormalizeResponse)
def normalize(body: NormalizeRequest, table: ColorTable = Depends(get_color_table)):
    results = normalize_lines(body.text, table)
    return NormalizeResponse(results=results, summary=summarize(results))


@app.post("/normalize/file", response_model=NormalizeResponse)
async def normalize_file(
    file: UploadFile = File(...),
    table: ColorTable = Depends(get_color_table),
    settings: Settings = Depends(get_settings),
):
    filename = (file.filename or "").lower()
    if not filename.endswith(UPLOAD_EXTENSIONS):
        logger.warning("Rejected upload %r: unsupported extension", file.filename)
        raise HTTPException(status_code=422, detail="Only .txt and .csv files are supported")

    # One byte past the limit is enough to tell the upload is too large.
    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        logger.warning("Rejected upload %r: %d bytes", file.filename, len(raw))
        raise HTTPException(status_code=413, detail="File too large")

    text, encoding = decode_text(raw)
    results = normalize_lines(text, table)
    return NormalizeResponse(results=results, summary=summarize(results), encoding=encoding)


@app.post("/render", response_class=HTMLResponse)
def render(body: NormalizeRequest, table: ColorTable = Depends(get_color_table)):
    return HTMLResponse(render_results_table(normalize_lines(body.text, table)))


@app.post("/export")
def export(
    body: NormalizeRequest,
    table: ColorTable = Depends(get_color_table),
    settings: Settings = Depends(get_settings),
):
    results = normalize_lines(body.text, table)
    if not results:
        raise HTTPException(status_code=422, detail="No SKUs to export")

    return Response(
        content=results_to_csv(results),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
    )
