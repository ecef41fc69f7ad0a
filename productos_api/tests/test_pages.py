"""Tests for the static text pages and health endpoint."""


def test_root_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Primera pantalla"
    assert response.headers["content-type"].startswith("text/plain")


def test_home_and_fav_pages(client):
    assert client.get("/home").text == "Pantalla dentro de HOME"
    assert client.get("/fav").text == "Pantalla de los FAVORITOS"


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "productos-api"}


def test_create_app_configures_logging(monkeypatch, data_path):
    import main
    from config import Settings

    levels = []
    monkeypatch.setattr(main, "configure_logging", levels.append)
    main.create_app(Settings(data_path=data_path, log_level="DEBUG"))
    assert levels == ["DEBUG"]
