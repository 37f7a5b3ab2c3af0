from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .config import settings
from .database import engine, Base, SessionLocal, check_connection
from .exceptions import AdminRequired, StorageFault
from .api import api_router
from .seed import seed_demo_products
from .templating import render
from . import models  # noqa: F401  (регистрирует таблицы в Base.metadata)

# Настройка логирования
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    logger.info(f"🚀 Starting {settings.app_name}...")

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables created")

        if settings.seed_demo_products:
            db = SessionLocal()
            try:
                seed_demo_products(db)
            finally:
                db.close()

    except Exception as e:
        logger.error(f"❌ Failed to start {settings.app_name}: {e}")
        raise

    yield

    logger.info(f"🛑 Shutting down {settings.app_name}...")
    engine.dispose()
    logger.info("✅ Database connection closed")


app = FastAPI(
    title=settings.app_name,
    description="Витрина, корзина, оформление заказа и панель администратора",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.session_https_only
)

app.include_router(api_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
    return response


@app.get("/health")
def health_check():
    """Проверка состояния сервиса"""
    try:
        check_connection()
    except Exception as e:
        logger.error(f"❌ Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unhealthy")

    return {
        "status": "healthy",
        "service": "storefront",
        "version": "1.0.0"
    }


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired):
    return RedirectResponse(url="/admin/login", status_code=303)


@app.exception_handler(StorageFault)
async def storage_fault_handler(request: Request, exc: StorageFault):
    logger.error(f"❌ Storage fault on {request.method} {request.url.path}: {exc}")
    return render(request, "error.html", {"message": "Something went wrong, please try again."}, status_code=500)


# Обработчик исключений
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик исключений"""
    logger.error(f"❌ Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred"
        }
    )


def run() -> None:
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
