import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from patternhub import __version__
from patternhub.api.routes import router
from patternhub.config import ALLOWED_ORIGINS, SEED_ON_STARTUP
from patternhub.db.session import SessionLocal, init_db
from patternhub.db.storage import DatabaseStorage
from patternhub.errors import NotFoundError, PatternHubError, ValidationError
from patternhub.seed import seed_if_empty

app = FastAPI(
    title="PatternHub",
    version=__version__,
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(PatternHubError)
async def patternhub_error_handler(request: Request, exc: PatternHubError):
    if isinstance(exc, ValidationError):
        status_code = 400
    elif isinstance(exc, NotFoundError):
        status_code = 404
    else:
        status_code = 500
        print(f"[ROUTES] {request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"message": str(exc) or "Internal error"})


@app.get("/health")
def health():
    return {"ok": True}


@app.on_event("startup")
def startup():
    retries = 5
    delay = 2

    for attempt in range(retries):
        try:
            init_db()
            print("[STARTUP] Database connected")
            break
        except OperationalError:
            print(f"[STARTUP] Waiting for database... ({attempt + 1}/{retries})")
            time.sleep(delay)
    else:
        # Do not crash the app
        print("[STARTUP] Database not ready - running without persistence")
        return

    if SEED_ON_STARTUP:
        session = SessionLocal()
        try:
            if seed_if_empty(DatabaseStorage(session)):
                print("[STARTUP] Seeded empty catalog")
        except PatternHubError as e:
            print(f"[STARTUP] Seeding skipped: {e}")
        finally:
            session.close()
