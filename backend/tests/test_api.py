"""
Route tests for /upload, /chat and /generated.

Run with: python -m pytest backend/tests/test_api.py -v
"""

from io import BytesIO

import pytest
from docx import Document
from openai import APIConnectionError
import httpx

from conftest import function_call, message, response


def chat_body(text="Hello", **extra):
    return {"messages": [{"id": "m1", "role": "user", "text": text}], **extra}


class TestUpload:
    def test_upload_text_and_image(self, api_client, upload_store):
        res = api_client.post(
            "/upload",
            files=[
                ("files", ("my notes.md", b"# Title\nbody", "text/markdown")),
                ("files", ("pic.png", b"\x89PNG", "image/png")),
            ],
        )

        assert res.status_code == 201
        notes, pic = res.json()["files"]

        assert notes["originalName"] == "my notes.md"
        assert notes["storedFilename"] == f"{notes['id']}-my_notes.md"
        assert notes["publicUrl"] == f"/uploads/{notes['storedFilename']}"
        assert notes["category"] == "text"
        assert notes["mimeType"] == "text/markdown"
        assert notes["size"] == len(b"# Title\nbody")
        assert notes["textPreview"] == "# Title\nbody"

        assert pic["category"] == "image"
        assert "textPreview" not in pic

        assert upload_store.resolve(notes["storedFilename"]).read_bytes() == b"# Title\nbody"

    def test_upload_other_category(self, api_client):
        res = api_client.post(
            "/upload", files={"files": ("deck.pdf", b"%PDF-1.4", "application/pdf")}
        )
        assert res.status_code == 201
        assert res.json()["files"][0]["category"] == "other"

    def test_upload_without_files(self, api_client):
        res = api_client.post("/upload", data={"other": "x"})
        assert res.status_code == 400

    def test_uploaded_file_served_from_public_url(self, api_client):
        res = api_client.post(
            "/upload", files={"files": ("a.txt", b"hello", "text/plain")}
        )
        public_url = res.json()["files"][0]["publicUrl"]

        served = api_client.get(public_url)
        assert served.status_code == 200
        assert served.content == b"hello"


class TestChatValidation:
    def test_unconfigured_client_returns_500(self, api_client):
        res = api_client.post("/chat", json=chat_body())
        assert res.status_code == 500
        assert res.json()["detail"] == "Azure OpenAI environment variables are not configured."

    @pytest.mark.parametrize(
        "body",
        [
            {"messages": []},
            {"messages": [{"id": "1", "role": "robot", "text": "hi"}]},
            {"messages": [{"id": "1", "role": "user", "text": ""}]},
            chat_body(temperature=2.5),
            chat_body(temperature=-0.1),
            {},
        ],
    )
    def test_invalid_payload_returns_400(self, api_client, use_llm_client, body):
        client = use_llm_client(response(message("unused")))

        res = api_client.post("/chat", json=body)

        assert res.status_code == 400
        payload = res.json()
        assert payload["detail"] == "Invalid request payload."
        assert payload["errors"]
        client.responses.create.assert_not_awaited()

    def test_unparsable_body_returns_400(self, api_client, use_llm_client):
        use_llm_client(response(message("unused")))

        res = api_client.post(
            "/chat", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert res.status_code == 400


class TestChat:
    def test_plain_reply(self, api_client, use_llm_client):
        use_llm_client(response(message("Hi!")))

        res = api_client.post("/chat", json=chat_body(temperature=0))

        assert res.status_code == 200
        msg = res.json()["message"]
        assert msg["role"] == "assistant"
        assert msg["text"] == "Hi!"
        assert msg["artifacts"] == []
        assert msg["generatedFiles"] == []
        assert msg["id"]
        assert msg["createdAt"]

    def test_csv_document_end_to_end(self, api_client, use_llm_client, generated_store):
        use_llm_client(
            response(
                function_call(
                    "create_document",
                    {"filename": "numbers", "type": "csv", "content": "1,2,3"},
                ),
                response_id="resp_1",
            ),
            response(message("Done"), response_id="resp_2"),
        )

        res = api_client.post("/chat", json=chat_body("Make me a CSV of 1,2,3"))

        assert res.status_code == 200
        msg = res.json()["message"]
        assert msg["role"] == "assistant"
        assert msg["text"] == "Done"

        (generated,) = msg["generatedFiles"]
        assert generated["type"] == "csv"
        assert generated["filename"] == "numbers.csv"
        assert generated["downloadUrl"] == f"/generated/{generated['id']}-numbers.csv"
        assert generated_store.resolve(generated["storedFilename"]).read_bytes() == b"1,2,3"

        download = api_client.get(generated["downloadUrl"])
        assert download.status_code == 200
        assert download.content == b"1,2,3"
        assert download.headers["content-type"] == "text/csv; charset=utf-8"
        assert download.headers["content-disposition"] == 'attachment; filename="numbers.csv"'

    def test_docx_document_downloads_as_docx(self, api_client, use_llm_client):
        use_llm_client(
            response(
                function_call(
                    "create_document",
                    {"filename": "memo.txt", "type": "docx", "content": "Intro\n\nBody"},
                ),
                response_id="resp_1",
            ),
            response(message("Here is your memo"), response_id="resp_2"),
        )

        msg = api_client.post("/chat", json=chat_body("Write a memo")).json()["message"]
        (generated,) = msg["generatedFiles"]
        assert generated["filename"] == "memo.docx"

        download = api_client.get(generated["downloadUrl"])
        assert download.headers["content-type"] == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        doc = Document(BytesIO(download.content))
        assert [p.text for p in doc.paragraphs if p.text] == ["Intro", "Body"]

    def test_artifact_returned_with_both_renditions(self, api_client, use_llm_client):
        use_llm_client(
            response(
                function_call(
                    "create_artifact",
                    {
                        "title": "Button",
                        "html": "<button>Go</button><p class='x'>text</p>",
                        "js": "console.log('go')",
                    },
                ),
                response_id="resp_1",
            ),
            response(message("Built it"), response_id="resp_2"),
        )

        msg = api_client.post("/chat", json=chat_body("Build a button")).json()["message"]

        (artifact,) = msg["artifacts"]
        assert artifact["title"] == "Button"
        assert "<script" not in artifact["previewHtml"]
        assert "console.log('go')" in artifact["fullHtml"]
        assert "description" not in artifact

    def test_missing_image_attachment_still_answers(self, api_client, use_llm_client):
        client = use_llm_client(response(message("I could not see the image")))
        body = {
            "messages": [
                {
                    "id": "m1",
                    "role": "user",
                    "text": "What is in this picture?",
                    "attachments": [
                        {
                            "id": "a1",
                            "originalName": "cat.png",
                            "storedFilename": "a1-cat.png",
                            "mimeType": "image/png",
                            "size": 123,
                            "publicUrl": "/uploads/a1-cat.png",
                            "category": "image",
                        }
                    ],
                }
            ]
        }

        res = api_client.post("/chat", json=body)

        assert res.status_code == 200
        sent = client.responses.create.await_args.kwargs["input"]
        assert sent[0]["content"][1] == {
            "type": "input_text",
            "text": 'Attachment "cat.png" could not be loaded from the server.',
        }

    def test_backend_error_returns_500(self, api_client, use_llm_client):
        request = httpx.Request("POST", "https://example.openai.azure.com/openai/v1/responses")
        use_llm_client(APIConnectionError(request=request))

        res = api_client.post("/chat", json=chat_body())

        assert res.status_code == 500
        assert res.json()["detail"].startswith("Failed to generate a response from Azure OpenAI")

    def test_runaway_tool_loop_returns_500(self, api_client, use_llm_client, test_settings):
        looping = [
            response(function_call("unknown", {}, call_id=f"c{i}"), response_id=f"r{i}")
            for i in range(test_settings.max_tool_iterations)
        ]
        use_llm_client(*looping)

        res = api_client.post("/chat", json=chat_body())

        assert res.status_code == 500
        assert "Maximum tool iterations exceeded" in res.json()["detail"]


class TestGeneratedDownload:
    @pytest.mark.parametrize(
        "path",
        [
            "/generated/..%2F..%2Fetc%2Fpasswd",
            "/generated/..%2Fuploads%2Fsecret.txt",
            "/generated/sub%2Ffile.txt",
        ],
    )
    def test_path_traversal_rejected(self, api_client, test_settings, path):
        test_settings.uploads_dir.mkdir(parents=True, exist_ok=True)
        (test_settings.uploads_dir / "secret.txt").write_text("secret")

        res = api_client.get(path)

        assert res.status_code == 400
        assert "secret" not in res.text

    def test_missing_file_returns_404(self, api_client):
        res = api_client.get("/generated/abc-missing.pdf")
        assert res.status_code == 404

    def test_pdf_served_with_pdf_type(self, api_client, generated_store):
        generated_store.root.mkdir(parents=True, exist_ok=True)
        (generated_store.root / "abc-report.pdf").write_bytes(b"%PDF-1.4 test")

        res = api_client.get("/generated/abc-report.pdf")

        assert res.status_code == 200
        assert res.headers["content-type"] == "application/pdf"
        assert res.headers["content-disposition"] == 'attachment; filename="report.pdf"'


class TestMisc:
    def test_health(self, api_client):
        assert api_client.get("/health").json() == {"status": "healthy"}

    def test_settings_are_masked(self, api_client):
        data = api_client.get("/settings").json()
        assert data["azure_openai_api_key"] == "test***********7890"
        assert data["azure_openai_deployment"] == "gpt-test"
        assert data["llm_configured"] is True
