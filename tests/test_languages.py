from sqlalchemy import func, select

from babobamboo.api.deps import parse_accept_language
from babobamboo.core.config import settings
from babobamboo.models import Language
from babobamboo.repositories.language_repo import LanguageRepository

API = settings.api_prefix


def _default_count(db) -> int:
    return db.scalar(select(func.count()).select_from(Language).where(Language.is_default == True))  # noqa: E712


def test_parse_accept_language_sorts_by_quality():
    assert parse_accept_language("en;q=0.5, nl-BE, fr;q=0.8") == ["nl", "fr", "en"]
    assert parse_accept_language("nl-BE,nl;q=0.9,*;q=0.1") == ["nl"]
    assert parse_accept_language("de;q=0, en") == ["en"]
    assert parse_accept_language(None) == []


def test_single_default_language(db):
    repo = LanguageRepository(db)
    repo.set_default_language("nl")

    db.expire_all()
    assert _default_count(db) == 1
    assert repo.get_default_code() == "nl"

    repo.create_language("fr", "French", "Français", is_default=True)
    db.expire_all()
    assert _default_count(db) == 1
    assert repo.get_default_code() == "fr"


def test_empty_table_falls_back_to_configuration(db):
    db.query(Language).delete()
    db.commit()
    repo = LanguageRepository(db)

    assert repo.get_default_code() == settings.default_language
    assert repo.get_active_codes() == settings.supported_languages


def test_list_languages_default_first(client):
    response = client.get(f"{API}/languages/")

    assert response.status_code == 200
    assert [language["code"] for language in response.json()["data"]] == ["en", "nl"]
    assert client.get(f"{API}/languages/codes").json()["data"] == ["en", "nl"]


def test_detection_order(client):
    current = f"{API}/languages/current"

    from_query = client.get(current, params={"lang": "nl"}, headers={"Accept-Language": "en"})
    from_header = client.get(current, headers={"Accept-Language": "fr-FR,nl;q=0.8,en;q=0.5"})
    default = client.get(current)

    assert from_query.json()["data"]["language"] == "nl"
    assert from_header.json()["data"]["language"] == "nl"
    assert default.json()["data"]["language"] == "en"
    assert default.headers["content-language"] == "en"
    assert "Accept-Language" in default.headers["vary"]


def test_unsupported_explicit_language_is_400(client):
    response = client.get(f"{API}/languages/current", params={"lang": "fr"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_inactive_language_is_not_selected(client, db):
    db.get(Language, "nl").is_active = False
    db.commit()

    response = client.get(f"{API}/languages/current", headers={"Accept-Language": "nl"})

    assert response.json()["data"]["language"] == "en"


def test_set_default_via_api(client, db, admin_headers, customer_headers):
    assert client.put(f"{API}/languages/nl/default", headers=customer_headers).status_code == 403
    assert client.put(f"{API}/languages/xx/default", headers=admin_headers).status_code == 404

    response = client.put(f"{API}/languages/nl/default", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["is_default"] is True
    db.expire_all()
    assert _default_count(db) == 1
    assert client.get(f"{API}/languages/current").json()["data"]["language"] == "nl"
