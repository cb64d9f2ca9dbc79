import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routers import calendar, google_tasks, ops, parse, tasks
from storage.task_store import TaskStoreError

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="pomotask")

app.include_router(parse.router)
app.include_router(tasks.router)
app.include_router(calendar.router)
app.include_router(google_tasks.router)
app.include_router(ops.router)


@app.exception_handler(TaskStoreError)
async def task_store_unreadable(request: Request, exc: TaskStoreError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} refused: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Task store is unreadable"})


@app.on_event("startup")
async def startup() -> None:
    logger.info("pomotask API started")
