"""Integration tests for the OK PDF HTTP endpoints."""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
import sys
import os
from urllib.parse import quote, unquote

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import fitz  # PyMuPDF


@pytest.fixture
def client():
    """Create a test client with a real codec and a mocked language model."""
    from main import app

    # Mock the startup event to avoid initializing real services
    with patch('main.startup_event'):
        client = TestClient(app)

        import main
        from services.document_codec import DocumentCodec
        from services.chat_session import ChatSessionManager
        from services.orchestrator import ToolOrchestrator

        main.orchestrator = ToolOrchestrator(
            codec=DocumentCodec(),
            llm_client=Mock(),
            chat_sessions=ChatSessionManager()
        )

        yield client


@pytest.fixture
def llm(client):
    import main
    from services.llm_client import LLMResponse

    main.orchestrator.llm_client.generate.return_value = LLMResponse(
        text="This is a test answer.",
        tokens_input=100,
        tokens_output=20,
        latency_ms=500,
        model_used="llama-3.3-70b-versatile"
    )
    return main.orchestrator.llm_client


def pdf_part(data, name="doc.pdf"):
    return (name, data, "application/pdf")


def page_texts(data):
    return [page.get_text().strip() for page in fitz.open(stream=data, filetype="pdf")]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["ai_enabled"] is True
    assert data["busy"] is False


def test_tools(client):
    response = client.get("/tools")

    assert response.status_code == 200
    assert len(response.json()) == 7
    assert response.json()[2] == {"id": "MERGE", "title": "Merge PDF", "description": "Combine multiple files"}


def test_merge(client, make_pdf):
    response = client.post(
        "/merge",
        files=[
            ("files", pdf_part(make_pdf(["a1"]), "a.pdf")),
            ("files", pdf_part(make_pdf(["b1", "b2"]), "b.pdf")),
        ],
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="merged_ok.pdf"' in response.headers["content-disposition"]
    assert page_texts(response.content) == ["a1", "b1", "b2"]


def test_merge_single_file_rejected(client, make_pdf):
    response = client.post("/merge", files=[("files", pdf_part(make_pdf(["a1"])))])

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "EMPTY_INPUT"


def test_split_with_custom_name(client, five_page_pdf):
    response = client.post(
        "/split",
        files={"file": pdf_part(five_page_pdf)},
        data={"pages": "5,2", "output_filename": "picked"},
    )

    assert response.status_code == 200
    assert 'filename="picked.pdf"' in response.headers["content-disposition"]
    assert page_texts(response.content) == ["Page 5 body", "Page 2 body"]


def test_split_out_of_range_only(client, five_page_pdf):
    response = client.post("/split", files={"file": pdf_part(five_page_pdf)}, data={"pages": "0,10"})

    assert response.status_code == 422
    assert response.json()["detail"]["error"]["code"] == "EMPTY_DOCUMENT"


def test_malformed_upload(client):
    response = client.post("/edit", files={"file": pdf_part(b"not a pdf")}, data={"text": "X"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "MALFORMED_DOCUMENT"


def test_edit(client, make_pdf):
    response = client.post("/edit", files={"file": pdf_part(make_pdf(["body"]))}, data={"text": "APPROVED"})

    assert response.status_code == 200
    assert "APPROVED" in page_texts(response.content)[0]


def test_extract(client, five_page_pdf):
    response = client.post("/extract", files={"file": pdf_part(five_page_pdf)})

    assert response.status_code == 200
    data = response.json()
    assert data["page_count"] == 5
    assert data["text"].count("--- Page ") == 5
    assert data["pages"][0] == {"page_number": 1, "width": 595, "height": 842}
    assert [p["page_number"] for p in data["pages"]] == [1, 2, 3, 4, 5]


def test_chat_and_history(client, llm, make_pdf):
    response = client.post(
        "/chat",
        files={"file": pdf_part(make_pdf(["Invoice"]))},
        data={"question": "What is this?"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["answer"] == "This is a test answer."
    assert [m["role"] for m in data["history"]] == ["user", "model"]

    history = client.get(f"/chat/{data['conversation_id']}")
    assert history.status_code == 200
    assert len(history.json()["history"]) == 2


def test_chat_history_unknown(client):
    response = client.get("/chat/conv_missing")

    assert response.status_code == 404


def test_chat_delete(client, llm, make_pdf):
    response = client.post(
        "/chat",
        files={"file": pdf_part(make_pdf(["Invoice"]))},
        data={"question": "What is this?"},
    )
    conversation_id = response.json()["conversation_id"]

    deleted = client.delete(f"/chat/{conversation_id}")

    assert deleted.status_code == 200
    assert deleted.json() == {"status": "deleted", "conversation_id": conversation_id}
    assert client.get(f"/chat/{conversation_id}").status_code == 404


def test_chat_delete_unknown(client):
    response = client.delete("/chat/conv_missing")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"


def test_llm_failure_maps_to_503(client, llm, make_pdf):
    from services.llm_client import LLMClientError, LLMError

    llm.generate.side_effect = LLMClientError(
        LLMError(code="RATE_LIMIT_ERROR", message="Rate limit exceeded.", details={"retry_after": 60})
    )

    response = client.post("/translate", files={"file": pdf_part(make_pdf(["Hello"]))})

    assert response.status_code == 503
    assert response.json()["detail"]["error"]["code"] == "RATE_LIMIT_ERROR"


def test_translate(client, llm, make_pdf):
    response = client.post("/translate", files={"file": pdf_part(make_pdf(["Hello"]))})

    assert response.status_code == 200
    assert 'filename="hindi_ok.pdf"' in response.headers["content-disposition"]
    assert "This is a test answer." in page_texts(response.content)[0]


def test_translate_non_ascii_filename(client, llm, make_pdf):
    response = client.post(
        "/translate",
        files={"file": pdf_part(make_pdf(["Hello"]))},
        data={"output_filename": "अनुवाद"},
    )

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert 'filename=".pdf"' in disposition
    assert f"filename*=UTF-8''{quote('अनुवाद.pdf')}" in disposition
    assert unquote(disposition.split("UTF-8''")[1]) == "अनुवाद.pdf"


def test_translate_unrenderable_text(client, llm, make_pdf):
    llm.generate.return_value.text = "漢字"

    response = client.post("/translate", files={"file": pdf_part(make_pdf(["Hello"]))})

    assert response.status_code == 422
    assert response.json()["detail"]["error"]["code"] == "UNRENDERABLE_TEXT"


def test_convert(client, llm, make_pdf):
    response = client.post(
        "/convert",
        files={"file": pdf_part(make_pdf(["raw"]))},
        data={"output_filename": "letter"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/msword")
    assert 'filename="letter.doc"' in response.headers["content-disposition"]
    assert response.text == "This is a test answer."


def test_photo_to_pdf(client, llm):
    response = client.post("/photo-to-pdf", files={"file": ("snap.png", b"\x89PNG", "image/png")})

    assert response.status_code == 200
    assert 'filename="photo_ok.pdf"' in response.headers["content-disposition"]


def test_photo_to_pdf_rejects_pdf(client, make_pdf):
    response = client.post("/photo-to-pdf", files={"file": pdf_part(make_pdf(["x"]))})

    assert response.status_code == 415


def test_busy_returns_409(client, make_pdf):
    import main
    main.orchestrator.loading = True

    response = client.post("/extract", files={"file": pdf_part(make_pdf(["x"]))})

    assert response.status_code == 409
    assert response.json()["detail"]["error"]["code"] == "BUSY"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
