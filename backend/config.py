"""Configuration management for OK PDF."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Model Configuration
TEXT_MODEL = os.getenv("TEXT_MODEL", "llama-3.3-70b-versatile")
VISION_MODEL = os.getenv("VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "4096"))
TEMPERATURE = 0.3

# Prompt Configuration
CHAT_SYSTEM_INSTRUCTION = "You are OK PDF AI. Help the user with their document."
PHOTO_OCR_PROMPT = "Extract all English text from this image accurately. Return only the text content."
TRANSLATE_CHAR_LIMIT = 10000

# Chat Configuration
MAX_CHAT_SESSIONS = int(os.getenv("MAX_CHAT_SESSIONS", "100"))

# Overlay Configuration (points, top-left origin)
OVERLAY_X = 50
OVERLAY_Y_FROM_TOP = 50
OVERLAY_FONT_SIZE = 30
OVERLAY_FONT = "hebo"  # Helvetica-Bold
OVERLAY_COLOR = (0.9, 0.1, 0.1)
OVERLAY_OPACITY = 0.5

# Text Layout Configuration
LAYOUT_MARGIN = 50
LAYOUT_BREAK_GAP = 20
LAYOUT_FONT_SIZE = 12
LAYOUT_LINE_GAP = 5
LAYOUT_MAX_LINE_CHARS = 100
# Unicode font for laid-out text: a TTF/OTF path (e.g. NotoSansDevanagari-Regular.ttf)
# takes precedence over a pymupdf-fonts name. FiraGO ("figo") covers Latin and Devanagari.
LAYOUT_FONT = os.getenv("LAYOUT_FONT", "figo")
LAYOUT_FONT_FILE = os.getenv("LAYOUT_FONT_FILE")
LAYOUT_PAGE_WIDTH = 595
LAYOUT_PAGE_HEIGHT = 842

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
