from fastapi import FastAPI, Query
from pathlib import Path
import json
import os

app = FastAPI(title="Mock FX Rate Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/fx_stub") if os.path.exists("/fx_stub") else Path(__file__).resolve().parents[1] / "fx_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rates")
def get_rates(pairs: str = Query("", description="Comma-separated FROM_TO keys")):
    known = json.loads((DATA_DIR / "rates.json").read_text())
    requested = [p for p in pairs.split(",") if p]
    return {"rates": {p: known[p] for p in requested if p in known}}
