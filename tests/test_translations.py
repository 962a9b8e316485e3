from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from babobamboo.core.config import settings
from babobamboo.core.exceptions import NotFoundError, PersistenceError, ValidationError
from babobamboo.models import Blog, Faq, Offer, Product, ProductTranslation
from babobamboo.models.translation import TranslatableMixin
from babobamboo.services.translation_service import TranslationService, merged_view, resolve_fields

API = settings.api_prefix


def _product_with(**translations) -> Product:
    product = Product(retail_price=Decimal("10.00"), is_active=True)
    for code, fields in translations.items():
        product.new_translation(code, **fields)
    return product


def _translation_count(db, product_id: int) -> int:
    return db.scalar(
        select(func.count()).select_from(ProductTranslation)
        .where(ProductTranslation.product_id == product_id)
    )


# ----- Résolution -----

def test_requested_language_wins_when_filled():
    product = _product_with(en={"name": "Cup", "description": "Bamboo cup"},
                            nl={"name": "Beker", "description": "Bamboe beker"})
    assert resolve_fields(product, "nl", "en") == {"name": "Beker", "description": "Bamboe beker"}


def test_fallback_is_field_by_field():
    product = _product_with(en={"name": "Cup", "description": "Bamboo cup"},
                            nl={"name": "Beker", "description": "  "})
    assert resolve_fields(product, "nl", "en") == {"name": "Beker", "description": "Bamboo cup"}


def test_missing_language_uses_default_language():
    product = _product_with(en={"name": "Cup", "description": None})
    assert resolve_fields(product, "nl", "en") == {"name": "Cup", "description": ""}


def test_no_translation_at_all_gives_empty_strings():
    assert resolve_fields(_product_with(), "nl", "en") == {"name": "", "description": ""}


def test_merged_view_sidecar_only_for_admin():
    product = _product_with(en={"name": "Cup"}, nl={"name": "Beker"})
    public = merged_view(product, "nl", "en")
    admin = merged_view(product, "nl", "en", with_translations=True)

    assert public["name"] == "Beker"
    assert public["language"] == "nl"
    assert public["retail_price"] == 10.0
    assert "translations" not in public
    assert admin["translations"] == {
        "en": {"name": "Cup", "description": None},
        "nl": {"name": "Beker", "description": None},
    }


# ----- Écriture -----

def test_create_writes_entity_and_translations(db):
    service = TranslationService(db, Product)
    product = service.create_entity(
        {"retail_price": Decimal("5.00")},
        {"en": {"name": "Straw"}, "nl": {"name": "Rietje"}},
        required_language="en",
        allowed_languages=["en", "nl"],
    )
    assert product.id is not None
    assert sorted(product.translations) == ["en", "nl"]
    assert _translation_count(db, product.id) == 2


def test_repeated_upserts_keep_one_row_per_language(db):
    service = TranslationService(db, Product)
    product = service.create_entity({}, {"en": {"name": "Straw"}}, required_language="en")

    service.update_entity(product.id, {}, {"en": {"name": "Straw v2"}, "nl": {"name": "Rietje"}},
                          required_language="en")
    service.update_entity(product.id, {}, {"en": {"name": "Straw v3"}, "nl": {"name": "Rietje v2"}},
                          required_language="en")

    db.expire_all()
    assert _translation_count(db, product.id) == 2
    product = service.get_entity(product.id)
    assert product.translations["en"].name == "Straw v3"
    assert product.translations["nl"].name == "Rietje v2"


def test_partial_update_keeps_other_fields(db):
    service = TranslationService(db, Product)
    product = service.create_entity(
        {}, {"en": {"name": "Straw", "description": "Reusable"}}, required_language="en"
    )
    service.update_entity(product.id, {"is_active": False}, {"en": {"name": "Straw XL"}},
                          required_language="en")

    db.expire_all()
    product = service.get_entity(product.id)
    assert product.is_active is False
    assert product.translations["en"].name == "Straw XL"
    assert product.translations["en"].description == "Reusable"


def test_missing_required_fields_are_all_reported(db):
    service = TranslationService(db, Blog)
    with pytest.raises(ValidationError) as exc_info:
        service.create_entity({}, {"en": {"excerpt": "Short"}}, required_language="en")

    assert len(exc_info.value.errors) == 2
    assert any("title" in error for error in exc_info.value.errors)
    assert any("content" in error for error in exc_info.value.errors)
    assert db.scalar(select(func.count()).select_from(Blog)) == 0


def test_unsupported_language_is_rejected(db):
    service = TranslationService(db, Product)
    with pytest.raises(ValidationError) as exc_info:
        service.create_entity({}, {"en": {"name": "Straw"}, "fr": {"name": "Paille"}},
                              required_language="en", allowed_languages=["en", "nl"])
    assert "fr" in exc_info.value.errors[0]


def test_incomplete_optional_language_is_skipped(db):
    service = TranslationService(db, Product)
    product = service.create_entity(
        {}, {"en": {"name": "Straw"}, "nl": {"description": "Alleen beschrijving"}}, required_language="en"
    )
    assert sorted(product.translations) == ["en"]


def test_update_without_request_language_requires_nothing(db):
    service = TranslationService(db, Product)
    product = service.create_entity({}, {"en": {"name": "Straw"}}, required_language="en")

    updated = service.update_entity(product.id, {"image_url": "/img/straw.png"}, {}, required_language="nl")
    assert updated.image_url == "/img/straw.png"


def test_delete_cascades_to_translations(db):
    service = TranslationService(db, Product)
    product = service.create_entity({}, {"en": {"name": "Straw"}, "nl": {"name": "Rietje"}},
                                    required_language="en")
    product_id = product.id

    service.delete_entity(product_id)

    assert _translation_count(db, product_id) == 0
    with pytest.raises(NotFoundError):
        service.get_entity(product_id)


def test_faqs_are_listed_by_sort_order(db):
    service = TranslationService(db, Faq)
    service.create_entity({"sort_order": 2}, {"en": {"question": "Q2", "answer": "A2"}}, required_language="en")
    service.create_entity({"sort_order": 1}, {"en": {"question": "Q1", "answer": "A1"}}, required_language="en")

    views, total = service.list_entities("en", "en")
    assert total == 2
    assert [view["question"] for view in views] == ["Q1", "Q2"]


# ----- API -----

def test_public_list_is_localized(client, make_product):
    make_product(name="Cup", name_nl="Beker")
    make_product(name="Hidden", is_active=False)

    response = client.get(f"{API}/products/", params={"lang": "nl"})

    assert response.status_code == 200
    assert response.headers["content-language"] == "nl"
    body = response.json()
    assert body["total"] == 1
    assert body["language"] == "nl"
    assert body["data"][0]["name"] == "Beker"
    assert body["data"][0]["description"] == "Cup description"
    assert "translations" not in body["data"][0]


def test_get_single_uses_accept_language(client, make_product):
    product = make_product(name="Cup", name_nl="Beker")

    response = client.get(f"{API}/products/{product.id}", headers={"Accept-Language": "nl-BE,nl;q=0.9"})

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Beker"


def test_get_unknown_entity_is_404(client):
    response = client.get(f"{API}/offers/999")

    assert response.status_code == 404
    assert response.json()["error"]["type"] == "not_found"


def test_admin_create_and_list_with_translations(client, admin_headers, make_product):
    make_product(name="Inactive", is_active=False)
    payload = {
        "retail_price": "19.90",
        "translations": {"en": {"name": "Toothbrush"}, "nl": {"name": "Tandenborstel"}},
    }

    created = client.post(f"{API}/products/", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["data"]["translations"]["nl"]["name"] == "Tandenborstel"

    listed = client.get(f"{API}/products/admin/all", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()["total"] == 2
    assert all("translations" in item for item in listed.json()["data"])


def test_create_without_default_language_name_is_400(client, admin_headers):
    payload = {"translations": {"nl": {"name": "Tandenborstel"}}}

    response = client.post(f"{API}/products/", json=payload, headers=admin_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "validation_error"
    assert error["errors"]


def test_writes_require_admin(client, customer_headers):
    payload = {"translations": {"en": {"title": "Hello", "content": "World"}}}

    assert client.post(f"{API}/blogs/", json=payload).status_code == 401
    assert client.post(f"{API}/blogs/", json=payload, headers=customer_headers).status_code == 403


def test_update_and_delete_via_api(client, admin_headers):
    payload = {"translations": {"en": {"title": "Jobs", "description": "Join us"}}}
    created = client.post(f"{API}/open-positions/", json=payload, headers=admin_headers)
    position_id = created.json()["data"]["id"]

    updated = client.put(
        f"{API}/open-positions/{position_id}",
        params={"lang": "nl"},
        json={"translations": {"nl": {"title": "Vacatures"}}},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "Vacatures"
    assert updated.json()["data"]["description"] == "Join us"

    deleted = client.delete(f"{API}/open-positions/{position_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"{API}/open-positions/{position_id}").status_code == 404


# ----- Atomicité -----

def _failing_new_translation(monkeypatch, fail_on: str):
    original = TranslatableMixin.new_translation

    def flaky(self, language_code, **fields):
        if language_code == fail_on:
            raise SQLAlchemyError("disk I/O error")
        return original(self, language_code, **fields)

    monkeypatch.setattr(Product, "new_translation", flaky)


def test_failed_translation_write_rolls_back_create(db, monkeypatch):
    _failing_new_translation(monkeypatch, fail_on="nl")
    service = TranslationService(db, Product)

    with pytest.raises(PersistenceError):
        service.create_entity({"retail_price": Decimal("5.00")},
                              {"en": {"name": "Straw"}, "nl": {"name": "Rietje"}},
                              required_language="en")

    assert db.scalar(select(func.count()).select_from(Product)) == 0
    assert db.scalar(select(func.count()).select_from(ProductTranslation)) == 0


def test_failed_translation_write_rolls_back_update(db, monkeypatch):
    service = TranslationService(db, Product)
    product = service.create_entity({"retail_price": Decimal("5.00")}, {"en": {"name": "Straw"}},
                                    required_language="en")
    product_id = product.id
    _failing_new_translation(monkeypatch, fail_on="nl")

    with pytest.raises(PersistenceError):
        service.update_entity(product_id, {"retail_price": Decimal("7.00")},
                              {"en": {"name": "Straw v2"}, "nl": {"name": "Rietje"}},
                              required_language="en")

    db.expire_all()
    product = service.get_entity(product_id)
    assert product.retail_price == Decimal("5.00")
    assert product.translations["en"].name == "Straw"
    assert _translation_count(db, product_id) == 1


# ----- Visibilité publique -----

def _offer(db, title, **base):
    offer = Offer(**base)
    offer.new_translation("en", title=title)
    db.add(offer)
    db.commit()
    return offer


def test_public_offers_respect_validity_window(client, db):
    now = datetime.now(timezone.utc)
    _offer(db, "Old sale", starts_at=now - timedelta(days=30), ends_at=now - timedelta(days=10))
    _offer(db, "Next sale", starts_at=now + timedelta(days=5), ends_at=now + timedelta(days=15))
    current = _offer(db, "Spring sale", starts_at=now - timedelta(days=1), ends_at=now + timedelta(days=1))
    _offer(db, "Always on")

    response = client.get(f"{API}/offers/")

    assert response.status_code == 200
    assert sorted(view["title"] for view in response.json()["data"]) == ["Always on", "Spring sale"]
    assert response.json()["total"] == 2
    assert client.get(f"{API}/offers/{current.id}").status_code == 200


def test_expired_offer_is_hidden_but_listed_for_admin(client, db, admin_headers):
    now = datetime.now(timezone.utc)
    expired = _offer(db, "Old sale", ends_at=now - timedelta(days=10))

    assert client.get(f"{API}/offers/{expired.id}").status_code == 404
    admin = client.get(f"{API}/offers/admin/all", headers=admin_headers)
    assert [view["title"] for view in admin.json()["data"]] == ["Old sale"]


def test_inactive_entity_single_get_is_404(client, admin_headers, make_product):
    hidden = make_product(name="Hidden", is_active=False)

    assert client.get(f"{API}/products/{hidden.id}").status_code == 404
    updated = client.put(f"{API}/products/{hidden.id}", json={"is_active": True}, headers=admin_headers)
    assert updated.status_code == 200
    assert client.get(f"{API}/products/{hidden.id}").json()["data"]["name"] == "Hidden"
