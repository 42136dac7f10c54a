from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import FileResponse
import logging
import shutil
import os
import uvicorn
from datetime import datetime
from pydantic import BaseModel

import config
import packager
from extractor import QuestionExtractor
from models import SCHEMA_VERSION
from util.equation_blob import converter_from_settings

from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    config.ensure_dirs()
    yield


app = FastAPI(lifespan=lifespan)

# Init Components
extractor = QuestionExtractor(converter_from_settings())


# Models
class ExtractRequest(BaseModel):
    filename: str


def _upload_path(filename: str) -> str:
    file_path = os.path.join(config.UPLOAD_DIR, os.path.basename(filename))
    if not os.path.exists(file_path):
        raise HTTPException(status_code=404, detail="File not found")
    return file_path


@app.post("/upload")
async def upload_file(file: UploadFile = File(...)):
    filename = os.path.basename(file.filename or "")
    if not filename:
        raise HTTPException(status_code=400, detail="Missing filename")
    config.ensure_dirs()
    file_path = os.path.join(config.UPLOAD_DIR, filename)
    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)
    return {"filename": filename}


@app.post("/extract")
def extract(req: ExtractRequest):
    file_path = _upload_path(req.filename)
    questions = extractor.extract(file_path)
    return {
        "count": len(questions),
        "schema_version": SCHEMA_VERSION,
        "questions": [q.to_json_dict() for q in questions],
    }


@app.post("/extract_zip")
def extract_zip(req: ExtractRequest):
    file_path = _upload_path(req.filename)
    questions = extractor.extract(file_path)

    stem = os.path.splitext(os.path.basename(req.filename))[0]
    filename = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.zip"
    packager.write_zip(questions, os.path.join(config.OUTPUT_DIR, filename))
    logger.info("Packaged %d questions from %s into %s", len(questions), req.filename, filename)
    return {"download_url": f"/download/{filename}", "count": len(questions)}


@app.get("/download/{filename}")
def download_file(filename: str):
    file_path = os.path.join(config.OUTPUT_DIR, os.path.basename(filename))
    if os.path.exists(file_path):
        return FileResponse(file_path, filename=filename, media_type="application/zip")
    raise HTTPException(status_code=404, detail="File not found")


# To run: uvicorn main:app --reload
if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
