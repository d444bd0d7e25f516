# backend/api/main.py
from __future__ import annotations

import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import RedirectResponse
from dotenv import load_dotenv


log = logging.getLogger("uvicorn.error")

# --- Load .env early so os.getenv works everywhere ---
load_dotenv()  # loads backend/api/.env if present

# Global API prefix (the web client calls /api/directions)
_API_PREFIX = os.getenv("API_PREFIX", "/api").strip()
if _API_PREFIX:
    if not _API_PREFIX.startswith("/"):
        _API_PREFIX = "/" + _API_PREFIX
    # avoid trailing slash so paths look like /api/directions (not //directions)
    _API_PREFIX = _API_PREFIX.rstrip("/")

app = FastAPI(
    title="Fastest Path API",
    version="1.0.0",
    description="Address-to-address driving directions (Nominatim geocoding + OSRM routing).",
)

# ---------------- CORS ----------------
# Prefer explicit origins via CORS_ORIGINS="https://app.example.com,https://staging.example.com"
# For local dev we allow any localhost/127.0.0.1 on any port.
cors_env = os.getenv("CORS_ORIGINS")
cors_kwargs = dict(allow_methods=["*"], allow_headers=["*"])

if cors_env:
    allow_origins = [o.strip() for o in cors_env.split(",") if o.strip()]
    cors_kwargs.update(allow_origins=allow_origins)
else:
    cors_kwargs.update(allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")

app.add_middleware(CORSMiddleware, **cors_kwargs)
log.info("CORS configured: %s", cors_kwargs)


# ---------------- Errors ----------------
# Malformed bodies get the same {"error": ...} shape as pipeline failures.
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse({"error": "Source and destination are required"}, status_code=400)


# ---------------- Routers ----------------
from routes.directions import router as directions_router
app.include_router(directions_router, prefix=_API_PREFIX)


# ---------------- Meta/utility ----------------
@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    # Visiting the root opens Swagger UI
    return RedirectResponse(url="/docs")

@app.get(f"{_API_PREFIX or ''}/health", tags=["meta"])
def health():
    return {"status": "ok", "prefix": _API_PREFIX or ""}

# ---------------- Local dev entrypoint ----------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
