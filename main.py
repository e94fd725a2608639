import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import init_db
from errors import register_exception_handlers
from log_config import setup_logging
from routers import auth, categories, goals, transactions

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Money Control API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(categories.router)
app.include_router(goals.router)
app.include_router(transactions.router)


@app.get("/")
def home():
    return {"message": "Money Control API running"}


logger.info("Money Control API ready")


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
