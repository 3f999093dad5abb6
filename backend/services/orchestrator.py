"""
Tool orchestration for OK PDF.

Maps each tool mode to its call sequence over the codec, composer,
overlay renderer, extractor, layout and language model. One action runs at
a time: the orchestrator raises its busy flag for the duration of an action
and rejects anything that arrives meanwhile.
"""
import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

from config import CHAT_SYSTEM_INSTRUCTION, PHOTO_OCR_PROMPT
from models.conversation import ChatSession
from models.document import ExtractedText, ToolOutput, UploadedFile
from models.errors import PdfOperationError, BUSY, EMPTY_INPUT, UNSUPPORTED_MEDIA
from services.chat_session import ChatSessionManager
from services.document_codec import DocumentCodec
from services.document_composer import DocumentComposer
from services.llm_client import LLMClient, LLMClientError, LLMError, ImageInput
from services.overlay_renderer import OverlayRenderer
from services.page_selector import parse_page_numbers
from services.text_extractor import TextExtractor
from services.text_layout import TextLayout

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOC_MEDIA_TYPE = "application/msword"


class ToolMode(str, Enum):
    READ = "READ"
    SPLIT = "SPLIT"
    MERGE = "MERGE"
    CONVERT_DOC = "CONVERT_DOC"
    EDIT = "EDIT"
    TRANSLATE = "TRANSLATE"
    PHOTO_TO_PDF = "PHOTO_TO_PDF"


TOOLS = [
    {"id": ToolMode.READ, "title": "Read & Chat", "description": "Ask AI about your PDF"},
    {"id": ToolMode.SPLIT, "title": "Split PDF", "description": "Extract specific pages"},
    {"id": ToolMode.MERGE, "title": "Merge PDF", "description": "Combine multiple files"},
    {"id": ToolMode.CONVERT_DOC, "title": "PDF to Doc", "description": "Format as Word document"},
    {"id": ToolMode.EDIT, "title": "Edit PDF", "description": "Add text overlays"},
    {"id": ToolMode.TRANSLATE, "title": "Hindi Translate", "description": "EN to Hindi conversion"},
    {"id": ToolMode.PHOTO_TO_PDF, "title": "Photo to PDF", "description": "English text photo to PDF"},
]

DEFAULT_FILENAMES = {
    ToolMode.MERGE: "merged_ok",
    ToolMode.SPLIT: "split_ok",
    ToolMode.EDIT: "edited_ok",
    ToolMode.TRANSLATE: "hindi_ok",
    ToolMode.CONVERT_DOC: "converted_ok",
    ToolMode.PHOTO_TO_PDF: "photo_ok",
}


def resolve_output_filename(requested: Optional[str], mode: ToolMode) -> str:
    """
    Pick the download name for a tool result.

    Names already ending in .pdf or .doc are kept; anything else gets .pdf.
    Document conversion always appends .doc to the base name.
    """
    base = (requested or "").strip() or DEFAULT_FILENAMES[mode]
    if mode == ToolMode.CONVERT_DOC:
        return f"{base}.doc"
    if base.endswith(".pdf") or base.endswith(".doc"):
        return base
    return f"{base}.pdf"


class ToolOrchestrator:
    """Runs one tool action at a time over uploaded files."""

    def __init__(
        self,
        codec: DocumentCodec,
        llm_client: Optional[LLMClient] = None,
        chat_sessions: Optional[ChatSessionManager] = None,
        token_encoder=None
    ):
        """
        Args:
            codec: Shared document codec, initialized once at startup
            llm_client: Language model client; required only by the AI tools
            chat_sessions: Transcript store for the Read & Chat tool
            token_encoder: Optional tiktoken encoding used to log prompt sizes
        """
        self.codec = codec
        self.llm_client = llm_client
        self.chat_sessions = chat_sessions or ChatSessionManager()
        self.token_encoder = token_encoder
        self.composer = DocumentComposer()
        self.overlay_renderer = OverlayRenderer(self.composer)
        self.extractor = TextExtractor()
        self.text_layout = TextLayout()
        self.loading = False
        self.status = ""

    @contextmanager
    def _action(self, operation: str, status: str = "") -> Iterator[Dict[str, int]]:
        """Run one tool at a time; the yielded dict collects counters for the completion log."""
        if self.loading:
            raise PdfOperationError.of(
                BUSY, "Another operation is in progress", operation=operation, status=self.status
            )

        self.loading = True
        self.status = status
        start_time = time.time()
        stats: Dict[str, int] = {}
        try:
            yield stats
            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"{operation} completed in {duration_ms}ms",
                extra=dict(stats, operation=operation, duration_ms=duration_ms)
            )
        except Exception as e:
            error = getattr(e, "error", None)
            code = error.code if error is not None else type(e).__name__
            logger.error(
                f"{operation} failed: {e}",
                exc_info=True,
                extra={"operation": operation, "error_code": code}
            )
            raise
        finally:
            self.loading = False
            self.status = ""

    # --- Preconditions ---

    @staticmethod
    def _require_files(files: Sequence[UploadedFile], minimum: int = 1, message: str = "Upload a file first.") -> None:
        if len(files) < minimum:
            raise PdfOperationError.of(EMPTY_INPUT, message, received=len(files), required=minimum)

    @staticmethod
    def _require_text(value: Optional[str], message: str) -> str:
        if not value or not value.strip():
            raise PdfOperationError.of(EMPTY_INPUT, message)
        return value

    def _require_llm(self) -> LLMClient:
        if self.llm_client is None:
            raise LLMClientError(LLMError(
                code="NOT_CONFIGURED",
                message="AI tools are unavailable: GROQ_API_KEY is not set",
                details={}
            ))
        return self.llm_client

    def _log_prompt_size(self, operation: str, prompt: str) -> None:
        if self.token_encoder is not None:
            logger.info(f"{operation} prompt: {len(self.token_encoder.encode(prompt))} tokens")

    # --- PDF tools ---

    def run_merge(self, files: Sequence[UploadedFile], output_filename: Optional[str] = None) -> ToolOutput:
        self._require_files(files, minimum=2, message="Please upload at least 2 files to merge.")
        with self._action("merge", "Merging PDFs...") as stats:
            documents = []
            try:
                for f in files:
                    documents.append(self.codec.load(f.data, f.name))
                with self.composer.merge(documents) as merged:
                    stats["page_count"] = merged.page_count
                    data = self.codec.serialize(merged)
            finally:
                for doc in documents:
                    doc.close()
            stats["output_bytes"] = len(data)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.MERGE), PDF_MEDIA_TYPE)

    def run_split(
        self,
        files: Sequence[UploadedFile],
        pages: str,
        output_filename: Optional[str] = None
    ) -> ToolOutput:
        self._require_files(files)
        self._require_text(pages, "Enter page numbers to extract (e.g. 1,3,5).")
        page_numbers = parse_page_numbers(pages)
        with self._action("split", "Splitting PDF...") as stats:
            with self.codec.load(files[0].data, files[0].name) as source:
                with self.composer.split(source, page_numbers) as result:
                    stats["page_count"] = result.page_count
                    data = self.codec.serialize(result)
            stats["output_bytes"] = len(data)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.SPLIT), PDF_MEDIA_TYPE)

    def run_edit(
        self,
        files: Sequence[UploadedFile],
        text: str,
        output_filename: Optional[str] = None
    ) -> ToolOutput:
        self._require_files(files)
        self._require_text(text, "Enter watermark text.")
        with self._action("edit", "Adding overlay...") as stats:
            with self.codec.load(files[0].data, files[0].name) as source:
                with self.overlay_renderer.apply_overlay(source, text) as edited:
                    stats["page_count"] = edited.page_count
                    data = self.codec.serialize(edited)
            stats["output_bytes"] = len(data)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.EDIT), PDF_MEDIA_TYPE)

    def run_extract(self, files: Sequence[UploadedFile]) -> ExtractedText:
        self._require_files(files)
        with self._action("extract", "Extracting text...") as stats:
            extracted = self._extract(files[0])
            stats["page_count"] = extracted.page_count
            return extracted

    def _extract(self, file: UploadedFile) -> ExtractedText:
        with self.codec.load(file.data, file.name) as source:
            extracted = self.extractor.extract(source)
            extracted.geometry = self.codec.page_info(source)
            return extracted

    def _layout_to_pdf(self, text: str, title: str, stats: Dict[str, int]) -> bytes:
        with self.text_layout.layout(text, title) as document:
            stats["page_count"] = document.page_count
            data = self.codec.serialize(document)
        stats["output_bytes"] = len(data)
        return data

    # --- AI tools ---

    def run_read(
        self,
        files: Sequence[UploadedFile],
        question: str,
        conversation_id: Optional[str] = None
    ) -> ChatSession:
        """Answer a question about the first file; returns the updated transcript."""
        self._require_files(files)
        self._require_text(question, "Enter a question about your document.")
        llm = self._require_llm()
        with self._action("read", "Reading document..."):
            session = self.chat_sessions.get_or_create_session(files[0].name, conversation_id)
            self.chat_sessions.add_user_message(session.conversation_id, question)
            document_text = self._extract(files[0]).to_string()
            prompt = LLMClient.build_chat_prompt(document_text, question)
            self._log_prompt_size("read", prompt)
            response = llm.generate(prompt, system_instruction=CHAT_SYSTEM_INSTRUCTION)
            self.chat_sessions.add_model_message(session.conversation_id, response.text or "No response.")
        return session

    def run_translate(self, files: Sequence[UploadedFile], output_filename: Optional[str] = None) -> ToolOutput:
        self._require_files(files)
        llm = self._require_llm()
        with self._action("translate", "Translating to Hindi...") as stats:
            document_text = self._extract(files[0]).to_string()
            prompt = LLMClient.build_translate_prompt(document_text)
            self._log_prompt_size("translate", prompt)
            response = llm.generate(prompt)
            data = self._layout_to_pdf(response.text or "Translation failed.", "Hindi Translation", stats)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.TRANSLATE), PDF_MEDIA_TYPE)

    def run_convert_doc(self, files: Sequence[UploadedFile], output_filename: Optional[str] = None) -> ToolOutput:
        """Reformat the document text; the result is plain text labeled as .doc."""
        self._require_files(files)
        llm = self._require_llm()
        with self._action("convert_doc", "Converting to Doc...") as stats:
            document_text = self._extract(files[0]).to_string()
            prompt = LLMClient.build_convert_prompt(document_text)
            self._log_prompt_size("convert_doc", prompt)
            response = llm.generate(prompt)
            data = (response.text or "").encode("utf-8")
            stats["output_bytes"] = len(data)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.CONVERT_DOC), DOC_MEDIA_TYPE)

    def run_photo_to_pdf(self, files: Sequence[UploadedFile], output_filename: Optional[str] = None) -> ToolOutput:
        self._require_files(files, message="Upload a photo first.")
        photo = files[0]
        if not (photo.content_type or "").startswith("image/"):
            raise PdfOperationError.of(
                UNSUPPORTED_MEDIA,
                f"{photo.name} is not an image",
                content_type=photo.content_type
            )
        llm = self._require_llm()
        with self._action("photo_to_pdf", "Extracting text from photo...") as stats:
            image = ImageInput(data=photo.data, mime_type=photo.content_type)
            response = llm.generate(PHOTO_OCR_PROMPT, image=image)
            data = self._layout_to_pdf(response.text or "No text found.", "Photo to PDF Result", stats)
            return ToolOutput(data, resolve_output_filename(output_filename, ToolMode.PHOTO_TO_PDF), PDF_MEDIA_TYPE)

    @staticmethod
    def tools() -> List[dict]:
        return [dict(tool, id=tool["id"].value) for tool in TOOLS]
