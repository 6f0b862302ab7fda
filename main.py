from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routes import auth, tasks
from database import create_db_and_tables
from logging_setup import setup_logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup"""
    create_db_and_tables()
    yield


# Create FastAPI app
app = FastAPI(
    title="2Day2Do API",
    description="Task list with markdown notes and per-user isolation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS configuration
cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])


@app.get("/")
def read_root():
    """Root endpoint"""
    return {
        "message": "2Day2Do API is running",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
