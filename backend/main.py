"""Main entry point for the OK PDF API."""
import logging
import uuid
from typing import List, Optional
from urllib.parse import quote

import tiktoken
from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from config import PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS, MAX_UPLOAD_BYTES
from logger import setup_logging
from models.api import ToolInfo, PageGeometry, ExtractResponse, ChatMessageOut, ChatResponse
from models.conversation import ChatSession
from models.document import ToolOutput, UploadedFile
from models.errors import (
    PdfOperationError,
    MALFORMED_DOCUMENT,
    EMPTY_INPUT,
    EMPTY_DOCUMENT,
    BUSY,
    NOT_FOUND,
    UNSUPPORTED_MEDIA,
    UNRENDERABLE_TEXT,
)
from services.chat_session import ChatSessionManager
from services.document_codec import DocumentCodec
from services.llm_client import LLMClient, LLMClientError
from services.orchestrator import ToolOrchestrator

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="OK PDF",
    description="PDF utilities: merge, split, edit, read & chat, translate, convert and photo to PDF",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

ERROR_STATUS = {
    MALFORMED_DOCUMENT: 400,
    EMPTY_INPUT: 400,
    EMPTY_DOCUMENT: 422,
    BUSY: 409,
    NOT_FOUND: 404,
    UNSUPPORTED_MEDIA: 415,
    UNRENDERABLE_TEXT: 422,
}

# Initialize services (will be done on startup)
orchestrator: ToolOrchestrator = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global orchestrator

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing OK PDF services...")

    try:
        codec = DocumentCodec()

        try:
            llm_client = LLMClient()
        except ValueError as e:
            logger.warning(f"AI tools disabled: {e}")
            llm_client = None

        try:
            token_encoder = tiktoken.get_encoding("o200k_base")
            logger.info("Initialized tiktoken encoder (o200k_base)")
        except Exception as e:
            logger.warning(f"Prompt token counting disabled: {e}")
            token_encoder = None

        orchestrator = ToolOrchestrator(
            codec=codec,
            llm_client=llm_client,
            chat_sessions=ChatSessionManager(),
            token_encoder=token_encoder
        )
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.exception_handler(PdfOperationError)
async def pdf_error_handler(request: Request, exc: PdfOperationError):
    status_code = ERROR_STATUS.get(exc.error.code, 500)
    logger.warning(f"{request.url.path} rejected: {exc.error.code} {exc.error.message}")
    return _error_response(status_code, exc.error.code, exc.error.message, exc.error.details)


@app.exception_handler(LLMClientError)
async def llm_error_handler(request: Request, exc: LLMClientError):
    logger.error(f"LLM client error on {request.url.path}: {exc.error.message}")
    return _error_response(503, exc.error.code, exc.error.message, exc.error.details)


def _error_response(status_code: int, code: str, message: str, details: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": {"code": code, "message": message, "details": details}}}
    )


async def _read_upload(upload: UploadFile) -> UploadedFile:
    """Read an upload fully into memory, enforcing the size limit."""
    data = await upload.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"{upload.filename} exceeds the {MAX_UPLOAD_BYTES} byte upload limit"
        )
    return UploadedFile(
        file_id=uuid.uuid4().hex,
        name=upload.filename or "upload",
        size=len(data),
        content_type=upload.content_type or "application/octet-stream",
        data=data
    )


def _file_response(output: ToolOutput) -> Response:
    # Header values must be latin-1: ASCII fallback plus the RFC 5987 UTF-8 form
    filename = output.filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "download"
    disposition = f"attachment; filename=\"{filename}\"; filename*=UTF-8''{quote(output.filename)}"
    return Response(
        content=output.data,
        media_type=output.media_type,
        headers={"Content-Disposition": disposition}
    )


def _chat_response(session: ChatSession) -> ChatResponse:
    history = [
        ChatMessageOut(role=m.role, content=m.content, timestamp=m.timestamp)
        for m in session.messages
    ]
    answer = session.messages[-1].content if session.messages else ""
    return ChatResponse(answer=answer, conversation_id=session.conversation_id, history=history)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "OK PDF API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "ok-pdf",
        "version": "1.0.0",
        "ai_enabled": orchestrator is not None and orchestrator.llm_client is not None,
        "busy": orchestrator is not None and orchestrator.loading
    }


@app.get("/tools", response_model=List[ToolInfo])
async def tools():
    """List the available tools."""
    return ToolOrchestrator.tools()


@app.post("/merge")
async def merge_endpoint(
    files: List[UploadFile] = File(...),
    output_filename: Optional[str] = Form(None)
):
    """Combine two or more PDFs into one, in upload order."""
    uploads = [await _read_upload(f) for f in files]
    logger.info(f"Merging {len(uploads)} files")
    return _file_response(orchestrator.run_merge(uploads, output_filename))


@app.post("/split")
async def split_endpoint(
    file: UploadFile = File(...),
    pages: str = Form(...),
    output_filename: Optional[str] = Form(None)
):
    """Extract the listed pages (e.g. "1,3,5") in the order given."""
    upload = await _read_upload(file)
    logger.info(f"Splitting {upload.name}: pages={pages!r}")
    return _file_response(orchestrator.run_split([upload], pages, output_filename))


@app.post("/edit")
async def edit_endpoint(
    file: UploadFile = File(...),
    text: str = Form(...),
    output_filename: Optional[str] = Form(None)
):
    """Stamp a text overlay onto every page."""
    upload = await _read_upload(file)
    return _file_response(orchestrator.run_edit([upload], text, output_filename))


@app.post("/extract", response_model=ExtractResponse)
async def extract_endpoint(file: UploadFile = File(...)):
    """Return the text of every page with page markers."""
    upload = await _read_upload(file)
    extracted = orchestrator.run_extract([upload])
    pages = [
        PageGeometry(page_number=p.page_number, width=p.width, height=p.height)
        for p in extracted.geometry
    ]
    return ExtractResponse(text=extracted.to_string(), page_count=extracted.page_count, pages=pages)


@app.post("/chat", response_model=ChatResponse)
async def chat_endpoint(
    file: UploadFile = File(...),
    question: str = Form(...),
    conversation_id: Optional[str] = Form(None)
):
    """Ask a question about an uploaded PDF."""
    upload = await _read_upload(file)
    logger.info(f"Chat question about {upload.name}: {question[:100]}")
    session = orchestrator.run_read([upload], question, conversation_id)
    return _chat_response(session)


@app.get("/chat/{conversation_id}", response_model=ChatResponse)
async def chat_history_endpoint(conversation_id: str):
    """Return the transcript of a chat session."""
    return _chat_response(orchestrator.chat_sessions.get_session(conversation_id))


@app.delete("/chat/{conversation_id}")
async def chat_delete_endpoint(conversation_id: str):
    """Discard a chat session and its transcript."""
    orchestrator.chat_sessions.clear(conversation_id)
    logger.info(f"Deleted chat session {conversation_id}")
    return {"status": "deleted", "conversation_id": conversation_id}


@app.post("/translate")
async def translate_endpoint(
    file: UploadFile = File(...),
    output_filename: Optional[str] = Form(None)
):
    """Translate the PDF's text to Hindi and return it as a new PDF."""
    upload = await _read_upload(file)
    return _file_response(orchestrator.run_translate([upload], output_filename))


@app.post("/convert")
async def convert_endpoint(
    file: UploadFile = File(...),
    output_filename: Optional[str] = Form(None)
):
    """Reformat the PDF's text as a document, returned as a .doc text file."""
    upload = await _read_upload(file)
    return _file_response(orchestrator.run_convert_doc([upload], output_filename))


@app.post("/photo-to-pdf")
async def photo_to_pdf_endpoint(
    file: UploadFile = File(...),
    output_filename: Optional[str] = Form(None)
):
    """Read English text from a photo and lay it out as a PDF."""
    upload = await _read_upload(file)
    return _file_response(orchestrator.run_photo_to_pdf([upload], output_filename))


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting OK PDF API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
