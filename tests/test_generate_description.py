from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.errors import GenerationError
from app.core.generation import ReplicateGenerator
from app.main import create_app


def test_generate_description_saves_result(client, generator, create_product):
    product = create_product(name="Stussy 8-Ball Tee", attributes="Cotton, Black, Size L")
    generator.result = "Great shirt."

    response = client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 200
    assert response.json()["description"] == "Great shirt."
    assert generator.calls == [("Stussy 8-Ball Tee", "Cotton, Black, Size L")]
    assert client.get(f"/api/products/{product['id']}").json()["description"] == "Great shirt."


def test_generate_description_overwrites_previous(client, generator, create_product):
    product = create_product()
    client.put(f"/api/products/{product['id']}", json={"description": "Old copy"})
    generator.result = "New copy"

    response = client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 200
    assert response.json()["description"] == "New copy"


def test_generate_description_not_found(client, generator):
    response = client.post("/api/products/999999/generate-description")

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}
    assert generator.calls == []


def test_generate_description_failure_keeps_previous(client, generator, create_product):
    """A failed generation answers 500 with the remote message and leaves the record alone"""
    product = create_product()
    client.put(f"/api/products/{product['id']}", json={"description": "Keep me"})
    generator.error = GenerationError("Replicate API did not return any text.")

    response = client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 500
    assert response.json() == {"error": "Replicate API did not return any text."}
    assert client.get(f"/api/products/{product['id']}").json()["description"] == "Keep me"


def test_generate_description_failure_without_previous(client, generator, create_product):
    product = create_product()
    generator.error = GenerationError("Invalid token.")

    response = client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 500
    assert response.json() == {"error": "Invalid token."}
    assert client.get(f"/api/products/{product['id']}").json()["description"] is None


@pytest.fixture
def replicate_session():
    return MagicMock()


@pytest.fixture
def replicate_client(test_settings, gateway, replicate_session):
    generator = ReplicateGenerator(
        api_token="r8_test",
        model="ibm-granite/granite-3.3-8b-instruct:618ecbe8",
        poll_interval=0,
        session=replicate_session,
    )
    app = create_app(settings=test_settings, gateway=gateway, generator=generator)
    with TestClient(app) as test_client:
        yield test_client


def replicate_response(body):
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = body
    return response


def test_generate_description_joins_replicate_fragments(replicate_client, replicate_session):
    product = replicate_client.post(
        "/api/products/", json={"name": "Stussy 8-Ball Tee", "attributes": "Cotton, Black, Size L"}
    ).json()
    replicate_session.post.return_value = replicate_response(
        {"id": "p1", "status": "succeeded", "output": ["Great ", "shirt."]}
    )

    response = replicate_client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 200
    assert response.json()["description"] == "Great shirt."
    prompt = replicate_session.post.call_args.kwargs["json"]["input"]["prompt"]
    assert "Stussy 8-Ball Tee" in prompt
    assert "Cotton, Black, Size L" in prompt
    assert replicate_client.get(f"/api/products/{product['id']}").json()["description"] == "Great shirt."


def test_generate_description_empty_replicate_output(replicate_client, replicate_session):
    product = replicate_client.post("/api/products/", json={"name": "Mug", "attributes": "Ceramic"}).json()
    replicate_client.put(f"/api/products/{product['id']}", json={"description": "Keep me"})
    replicate_session.post.return_value = replicate_response({"id": "p1", "status": "succeeded", "output": []})

    response = replicate_client.post(f"/api/products/{product['id']}/generate-description")

    assert response.status_code == 500
    assert response.json() == {"error": "Replicate API did not return any text."}
    assert replicate_client.get(f"/api/products/{product['id']}").json()["description"] == "Keep me"
