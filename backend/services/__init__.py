"""Services for OK PDF."""
from .document_codec import DocumentCodec
from .page_selector import select_pages, parse_page_numbers
from .document_composer import DocumentComposer
from .overlay_renderer import OverlayRenderer
from .text_extractor import TextExtractor, TextContentReader
from .text_layout import TextLayout, LinePlacement
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError, ImageInput
from .chat_session import ChatSessionManager
from .orchestrator import ToolOrchestrator, ToolMode, resolve_output_filename

__all__ = ['DocumentCodec', 'select_pages', 'parse_page_numbers', 'DocumentComposer', 'OverlayRenderer', 'TextExtractor', 'TextContentReader', 'TextLayout', 'LinePlacement', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ImageInput', 'ChatSessionManager', 'ToolOrchestrator', 'ToolMode', 'resolve_output_filename']
