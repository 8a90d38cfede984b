"""Configuration management for the AI Book Assistant."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Service Configuration
SERVICE_NAME = os.getenv("SERVICE_NAME", "ai-book-assistant")
SERVICE_VERSION = "1.0.0"

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS", 
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Chat Configuration
REPLY_DELAY_MS = int(os.getenv("REPLY_DELAY_MS", "500"))  # simulated thinking time

# Session Registry Configuration
SESSION_TTL_SECONDS = float(os.getenv("SESSION_TTL_SECONDS", "1800"))  # 0 disables idle eviction
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "100"))

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
