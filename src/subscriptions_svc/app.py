import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from subscriptions_svc.config import settings
from subscriptions_svc.models.base import init_db
from subscriptions_svc.routers import subscription_router

logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_schema:
        init_db()
        logging.info("Database schema ensured")
    yield


app = FastAPI(title="Subscriptions Service API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logging.error(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


# Include the subscriptions router under the '/api/v1' prefix
app.include_router(subscription_router.router, prefix="/api/v1")


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
