# dietplan/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from dietplan import config
from dietplan.routers import plans

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Diet Plan Interpreter API", version="1.0.0")

app.add_middleware(GZipMiddleware, minimum_size=1000)

# CORS middleware to allow frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans.router)


@app.get("/")
def home():
    return {"message": "Diet Plan Interpreter API Running"}


@app.get("/health")
def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy"}
