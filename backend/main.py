"""FastAPI main application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from backend.api.routes import router
from backend.services.session_service import session_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the conversation on startup and release storage on shutdown."""
    logger.info("Starting SentiChat API...")
    status = session_service.get_health_status()
    if status["storage"] == "memory":
        logger.warning("Redis unavailable, chat history will not survive a restart")
    if status["llm"] == "missing_api_key":
        logger.warning("GROQ_API_KEY is not set, chat replies will report a configuration error")
    logger.info(f"Conversation loaded with {len(session_service.session.transcript)} messages")

    yield

    logger.info("Shutting down SentiChat API...")
    session_service.close()


# Create FastAPI app
app = FastAPI(
    title="SentiChat API",
    description="Backend API for SentiChat - chat companion with sentiment analysis",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "SentiChat API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/api/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
