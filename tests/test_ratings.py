import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from babobamboo.core.config import settings
from babobamboo.core.exceptions import PersistenceError
from babobamboo.models import Order, OrderRating
from babobamboo.repositories.order_repo import OrderRepository
from babobamboo.repositories.rating_repo import RatingRepository
from babobamboo.services.rating_service import ProductRatingInput, RatingCapability, RatingService

API = settings.api_prefix


def _rating_count(db) -> int:
    return db.scalar(select(func.count()).select_from(OrderRating))


def _submission(order, overall=5, products=None):
    products = products if products is not None else [item.product_id for item in order.items]
    return {
        "order_id": order.id,
        "rating_token": order.rating_token,
        "overall_rating": overall,
        "overall_comment": "Très bien",
        "product_ratings": [{"product_id": product_id, "rating": 4} for product_id in products],
    }


# ----- Page publique -----

def test_lookup_by_token_returns_localized_items(client, make_product, make_order):
    order = make_order(products=[make_product(name="Cup", name_nl="Beker"), make_product(name="Straw")])

    response = client.get(f"{API}/orders/by-token/{order.rating_token}", params={"lang": "nl"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["order_id"] == order.id
    assert sorted(item["product_name"] for item in data["items"]) == ["Beker", "Straw"]
    assert "rating_token" not in data


def test_lookup_unknown_token_is_404(client):
    response = client.get(f"{API}/orders/by-token/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"]["type"] == "not_found"


def test_lookup_used_token_is_already_rated(client, make_order):
    order = make_order(used=True)

    response = client.get(f"{API}/orders/by-token/{order.rating_token}")

    assert response.status_code == 409
    assert response.json()["error"]["type"] == "already_rated"


# ----- Soumission -----

def test_token_is_single_use(client, db, make_product, make_order):
    order = make_order(products=[make_product(), make_product(name="Straw")])

    first = client.post(f"{API}/ratings/", json=_submission(order))
    second = client.post(f"{API}/ratings/", json=_submission(order, overall=1))

    assert first.status_code == 201
    assert first.json()["data"]["ratings_created"] == 3
    assert second.status_code == 409
    assert second.json()["error"]["type"] == "already_rated"

    db.expire_all()
    assert _rating_count(db) == 3
    assert db.get(Order, order.id).rating_token_used is True
    overall = [rating for rating in RatingRepository(db).get_order_ratings(order.id) if rating.is_overall]
    assert len(overall) == 1
    assert overall[0].rating == 5


def test_token_must_belong_to_the_same_order(client, db, make_order):
    order_a = make_order()
    order_b = make_order()
    payload = _submission(order_a)
    payload["rating_token"] = order_b.rating_token

    response = client.post(f"{API}/ratings/", json=payload)

    assert response.status_code == 404
    db.expire_all()
    assert _rating_count(db) == 0
    assert db.get(Order, order_a.id).rating_token_used is False
    assert db.get(Order, order_b.id).rating_token_used is False


def test_products_must_belong_to_the_order(client, db, make_product, make_order):
    order = make_order()
    other = make_product(name="Other")

    response = client.post(f"{API}/ratings/", json=_submission(order, products=[other.id]))

    assert response.status_code == 400
    db.expire_all()
    assert db.get(Order, order.id).rating_token_used is False


def test_duplicate_product_ratings_are_rejected(client, make_order):
    order = make_order()
    product_id = order.items[0].product_id

    response = client.post(f"{API}/ratings/", json=_submission(order, products=[product_id, product_id]))

    assert response.status_code == 400


def test_out_of_range_and_empty_ratings_are_rejected(client, make_order):
    order = make_order()

    assert client.post(f"{API}/ratings/", json=_submission(order, overall=6)).status_code == 400
    assert client.post(f"{API}/ratings/", json=_submission(order, products=[])).status_code == 400


def test_used_token_wins_over_invalid_values(client, db, make_order):
    order = make_order(used=True)

    response = client.post(f"{API}/ratings/", json=_submission(order, overall=9, products=[]))

    assert response.status_code == 409
    assert response.json()["error"]["type"] == "already_rated"
    db.expire_all()
    assert _rating_count(db) == 0


def test_unknown_token_wins_over_invalid_values(client, make_order):
    order = make_order()
    payload = _submission(order, overall=0)
    payload["rating_token"] = "not-the-token"

    assert client.post(f"{API}/ratings/", json=payload).status_code == 404


def test_failure_mid_submission_leaves_nothing(db, monkeypatch, make_product, make_order):
    order = make_order(products=[make_product(name=f"P{index}") for index in range(4)])
    capability = RatingCapability(order_id=order.id, token=order.rating_token)
    ratings = [ProductRatingInput(product_id=item.product_id, rating=5) for item in order.items]

    original = RatingRepository.add_rating
    calls = []

    def flaky(self, *args, **kwargs):
        calls.append(args)
        # 1 note globale puis 4 notes produits : échec sur la 3e note produit
        if len(calls) == 4:
            raise SQLAlchemyError("disk I/O error")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(RatingRepository, "add_rating", flaky)
    with pytest.raises(PersistenceError):
        RatingService(db).submit_ratings(capability, 4, None, ratings)

    db.expire_all()
    assert _rating_count(db) == 0
    assert db.get(Order, order.id).rating_token_used is False

    # Le lien reste utilisable après l'échec
    monkeypatch.setattr(RatingRepository, "add_rating", original)
    assert RatingService(db).submit_ratings(capability, 4, None, ratings) == 5


def test_claim_succeeds_only_once(db, make_order):
    order = make_order()
    repo = OrderRepository(db)

    assert repo.claim_rating_token(order.id) is True
    assert repo.claim_rating_token(order.id) is False


def test_capability_repr_hides_token():
    capability = RatingCapability(order_id=7, token="0123456789abcdef")

    assert "0123456789abcdef" not in repr(capability)
    assert "7" in repr(capability)


def test_admin_lists_ratings(client, admin_headers, customer_headers, make_order):
    order = make_order()
    client.post(f"{API}/ratings/", json=_submission(order))

    assert client.get(f"{API}/ratings/", headers=customer_headers).status_code == 403
    response = client.get(f"{API}/ratings/", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["total"] == 2
    assert {rating["order_id"] for rating in response.json()["data"]} == {order.id}
