def test_root_returns_welcome_message(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Welcome to the API"}


def test_health_returns_status(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Server is healthy"}


def test_responses_carry_process_time_header(client):
    response = client.get("/health")

    assert "x-process-time" in response.headers
