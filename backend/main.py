from fastapi import FastAPI, Request
from dotenv import load_dotenv

load_dotenv()
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from database import Base, engine
from datetime import datetime
import routers.auth as auth
import routers.farms as farms
import routers.products as products
import routers.users as users
import routers.production as production
import routers.invoices as invoices
import routers.inventory as inventory
import routers.stats as stats
import routers.notifications as notifications
import routers.reports as reports
import models  # registers every table on Base.metadata
import logging
import os
import time


LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

# One log file per process start
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE,
    filemode='a'
)

# Mirror the log file on the console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---

APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"

if os.getenv("CREATE_TABLES", "true").lower() in ("1", "true", "yes"):
    Base.metadata.create_all(bind=engine)


app = FastAPI(
    title="Poultry Farm Management API",
    version="1.0.0",
    description="Production records, sales invoices and egg stock for a group of poultry farms",
)

allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:5000"
)
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',') if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

session_secret = os.getenv("SESSION_SECRET")
if not session_secret:
    if IS_PRODUCTION:
        logger.warning("SESSION_SECRET is not set; falling back to the development secret")
    session_secret = "poultry-farm-dev-secret"

app.add_middleware(
    SessionMiddleware,
    secret_key=session_secret,
    session_cookie="poultry_session",
    max_age=int(os.getenv("SESSION_MAX_AGE", "86400")),
    same_site="lax",
    https_only=IS_PRODUCTION,
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = int((time.time() - start) * 1000)
        logging.getLogger("http").info(f"{request.method} {request.url.path} {response.status_code} in {duration_ms}ms")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    issues = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {issues}")
    return JSONResponse(status_code=400, content={"error": issues})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = "Internal Server Error" if IS_PRODUCTION else str(exc) or exc.__class__.__name__
    return JSONResponse(status_code=500, content={"error": message})


app.include_router(auth.router)
app.include_router(farms.router)
app.include_router(products.router)
app.include_router(users.router)
app.include_router(production.router)
app.include_router(invoices.router)
app.include_router(inventory.router)
app.include_router(stats.router)
app.include_router(notifications.router)
app.include_router(reports.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Poultry Farm Management API!"}
