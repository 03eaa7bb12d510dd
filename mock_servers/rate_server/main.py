from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Rate Table Server", version="1.0.0")
# Support both local development and Docker
DATA_FILE = (
    Path("/rate_stub/state_rates.json")
    if os.path.exists("/rate_stub")
    else Path(__file__).resolve().parents[2] / "ma_wc_engine" / "data" / "state_rates.json"
)

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/state_rates.json")
def get_state_rates():
    if not DATA_FILE.exists():
        raise HTTPException(status_code=404, detail="rate table not found")
    return JSONResponse(content=json.loads(DATA_FILE.read_text()))
