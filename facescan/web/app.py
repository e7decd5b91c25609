"""
Emergency face scan page.

Serves the single scan page (webcam capture widget + result panels driven by
static/scan.js) and mounts the scan API underneath it, so the browser talks
to /scan/* on the same origin it loaded the page from.
"""
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from facescan.services.api import app as api_app

WEB_DIR = Path(__file__).resolve().parent
SCAN_PAGE = (WEB_DIR / "templates" / "index.html").read_text(encoding="utf-8")

app = FastAPI(title="facescan web")

# register "/" before mount("") below, which would otherwise catch it
@app.get("/", response_class=HTMLResponse)
def scan_page():
    return SCAN_PAGE

app.mount("/static", StaticFiles(directory=str(WEB_DIR / "static")), name="static")

# mount API sub-app last, its "" prefix would shadow routes above it
app.mount("", api_app)
