from fastapi.testclient import TestClient

from conftest import PNG_BYTES, FakeSession
from geminiapi.api.http_api import create_app
from geminiapi.core.generation_types import image_part
from geminiapi.llm.client import ProviderError
from geminiapi.llm.provider_config import ProviderConfig


def _image(data=PNG_BYTES):
    return {"image": ("image.png", data, "image/png")}


def test_missing_type_returns_400(client, fake_session) -> None:
    response = client.post("/", data={"text": "Hello"}, files=_image())

    assert response.status_code == 400
    assert "type or text" in response.text
    assert fake_session.calls == []


def test_missing_text_returns_400(client, fake_session) -> None:
    response = client.post("/", data={"type": "modal"}, files=_image())

    assert response.status_code == 400
    assert "type or text" in response.text
    assert fake_session.calls == []


def test_empty_fields_return_400(client) -> None:
    response = client.post("/", data={"type": "", "text": ""}, files=_image())

    assert response.status_code == 400
    assert response.text == "missing mandatory fields. type or text"


def test_unknown_type_returns_400(client, fake_session) -> None:
    response = client.post("/", data={"type": "video", "text": "Hello"}, files=_image())

    assert response.status_code == 400
    assert response.text == "invalid type. Select modal or multimodal"
    assert fake_session.calls == []


def test_modal_uses_text_model_only(client, fake_session) -> None:
    response = client.post("/", data={"type": "modal", "text": "Hello"}, files=_image(b""))

    assert response.status_code == 200
    assert response.json() == [{"text": "Hi there"}]
    assert fake_session.calls == [("gemini-pro", [{"text": "Hello"}])]


def test_multimodal_sends_image_then_text(client, fake_session) -> None:
    response = client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image())

    assert response.status_code == 200
    assert response.json() == [{"text": "Hi there"}]
    assert len(fake_session.calls) == 1
    model_name, parts = fake_session.calls[0]
    assert model_name == "gemini-pro-vision"
    assert parts == [image_part("png", PNG_BYTES), {"text": "Describe"}]


def test_modal_without_image_returns_400(client, fake_session) -> None:
    response = client.post("/", data={"type": "modal", "text": "Hello"})

    assert response.status_code == 400
    assert response.text == "missing image file"
    assert fake_session.calls == []


def test_multimodal_with_empty_image_returns_400(client, fake_session) -> None:
    response = client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image(b""))

    assert response.status_code == 400
    assert fake_session.calls == []


def test_image_optional_for_modal_when_relaxed(fake_session) -> None:
    config = ProviderConfig(api_key="test-key", image_required_for_all_modes=False)
    client = TestClient(create_app(fake_session, config))

    ok = client.post("/", data={"type": "modal", "text": "Hello"})
    rejected = client.post("/", data={"type": "multimodal", "text": "Describe"})

    assert ok.status_code == 200
    assert rejected.status_code == 400
    assert fake_session.calls == [("gemini-pro", [{"text": "Hello"}])]


def test_oversized_image_returns_400(fake_session) -> None:
    config = ProviderConfig(api_key="test-key", max_image_bytes=4)
    client = TestClient(create_app(fake_session, config))

    response = client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image())

    assert response.status_code == 400
    assert response.text == "image exceeds max size limit"
    assert fake_session.calls == []


def test_zero_candidates_returns_500() -> None:
    for mode in ("modal", "multimodal"):
        session = FakeSession(response={"candidates": []})
        client = TestClient(create_app(session, ProviderConfig(api_key="test-key")))

        response = client.post("/", data={"type": mode, "text": "Hello"}, files=_image())

        assert response.status_code == 500
        assert response.text == "error generating response"


def test_provider_failure_returns_500_with_input_text() -> None:
    session = FakeSession(error=ProviderError("gemini-pro HTTP ERROR (429)"))
    client = TestClient(create_app(session, ProviderConfig(api_key="test-key")))

    response = client.post("/", data={"type": "modal", "text": "Hello"}, files=_image())

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert "Hello" in response.text
    assert "429" in response.text


def test_blocked_candidate_without_content_returns_500() -> None:
    session = FakeSession(response={"candidates": [{"finishReason": "SAFETY"}]})
    client = TestClient(create_app(session, ProviderConfig(api_key="test-key")))

    response = client.post("/", data={"type": "modal", "text": "Hello"}, files=_image())

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "error generating response"


def test_malformed_candidates_return_plain_text_500() -> None:
    for body in ({"candidates": ["x"]}, {"candidates": "x"}, {"candidates": [{"content": "x"}]}):
        session = FakeSession(response=body)
        client = TestClient(create_app(session, ProviderConfig(api_key="test-key")))

        response = client.post("/", data={"type": "modal", "text": "Hello"}, files=_image())

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "error generating response"


def test_non_object_provider_body_returns_wrapped_500() -> None:
    session = FakeSession(error=ProviderError("gemini-pro returned a non-object JSON response"))
    client = TestClient(create_app(session, ProviderConfig(api_key="test-key")))

    response = client.post("/", data={"type": "modal", "text": "Hello"}, files=_image())

    assert response.status_code == 500
    assert response.text.startswith("error generating content to text: Hello.")


def test_malformed_multipart_body_returns_plain_text_400(client, fake_session) -> None:
    response = client.post(
        "/",
        content=b"garbage",
        headers={"content-type": "multipart/form-data; boundary=x"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("invalid form body")
    assert fake_session.calls == []


def test_configured_model_names_are_used(fake_session) -> None:
    config = ProviderConfig(api_key="test-key", text_model="gemini-1.5-flash", vision_model="gemini-1.5-pro")
    client = TestClient(create_app(fake_session, config))

    client.post("/", data={"type": "modal", "text": "Hello"}, files=_image())
    client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image())

    assert [name for name, _ in fake_session.calls] == ["gemini-1.5-flash", "gemini-1.5-pro"]


def test_identical_requests_produce_identical_bodies(client) -> None:
    first = client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image())
    second = client.post("/", data={"type": "multimodal", "text": "Describe"}, files=_image())

    assert first.status_code == 200
    assert first.content == second.content


def test_get_is_not_routed(client) -> None:
    response = client.get("/")

    assert response.status_code == 405
