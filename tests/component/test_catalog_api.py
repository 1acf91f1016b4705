"""
Component tests for the catalog, reviews, favorites and admin routes.
"""
from decimal import Decimal
from unittest.mock import patch

from fastapi.testclient import TestClient

from storefront.main import app

from tests.conftest import DESCRIPTION, auth, payment_step


def product_form(**overrides):
    form = {
        "name": "sleek sofa",
        "company": "Modenza",
        "price": "199.99",
        "description": DESCRIPTION,
        "featured": "true",
    }
    form.update(overrides)
    return form


IMAGE = {"image": ("sofa.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")}


class TestPublicCatalog:

    def test_featured_only(self, client: TestClient, make_product):
        make_product("plain stool")
        featured = make_product("velvet lamp", featured=True)

        response = client.get("/products/featured")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [featured.id]

    def test_search_matches_name_or_company(self, client: TestClient, make_product):
        chair = make_product("chic chair", company="Luxora")
        lamp = make_product("desk lamp", company="Chicago Lights")
        make_product("oak table", company="Woodcraft")

        response = client.get("/products", params={"search": "chic"})

        assert sorted(p["id"] for p in response.json()) == sorted([chair.id, lamp.id])
        assert len(client.get("/products").json()) == 3

    def test_single_product(self, client: TestClient, make_product):
        product = make_product(price="25.50")

        body = client.get(f"/products/{product.id}").json()

        assert body["name"] == "chic chair"
        assert Decimal(body["price"]) == Decimal("25.50")
        assert client.get("/products/999").status_code == 404


class TestAdminProducts:

    def test_non_admin_is_redirected(self, client: TestClient):
        response = client.get("/admin/products", headers=auth("alice"), follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_anonymous_is_unauthenticated(self, client: TestClient):
        assert client.get("/admin/products").status_code == 401

    def test_create_product(self, client: TestClient, make_admin, storage):
        make_admin()

        response = client.post("/admin/products", data=product_form(), files=IMAGE, headers=auth("admin"))

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "sleek sofa"
        assert body["featured"] is True
        assert body["image"].endswith("1-sofa.jpg")
        assert storage.uploaded == ["1-sofa.jpg"]
        assert [p["id"] for p in client.get("/admin/products", headers=auth("admin")).json()] == [body["id"]]

    def test_short_description_is_rejected_before_upload(self, client: TestClient, make_admin, storage):
        make_admin()

        response = client.post(
            "/admin/products",
            data=product_form(description="too short"),
            files=IMAGE,
            headers=auth("admin"),
        )

        assert response.status_code == 400
        assert "description" in response.json()["message"]
        assert storage.uploaded == []

    def test_non_image_upload_is_rejected(self, client: TestClient, make_admin):
        make_admin()

        response = client.post(
            "/admin/products",
            data=product_form(),
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth("admin"),
        )

        assert response.status_code == 400
        assert response.json()["message"].endswith("File must be an image")

    def test_failed_upload_creates_nothing(self, client: TestClient, make_admin, storage):
        make_admin()
        storage.fail_uploads = True

        response = client.post("/admin/products", data=product_form(), files=IMAGE, headers=auth("admin"))

        assert response.status_code == 502
        assert response.json() == {"message": "Image upload failed"}
        assert client.get("/products").json() == []

    def test_update_product(self, client: TestClient, make_admin, make_product):
        make_admin()
        product = make_product()

        response = client.put(
            f"/admin/products/{product.id}",
            data=product_form(name="chic chair v2", price="12.00", featured="false"),
            headers=auth("admin"),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "chic chair v2"
        assert Decimal(response.json()["price"]) == Decimal("12.00")

    def test_replace_image_deletes_the_old_one(self, client: TestClient, make_admin, make_product, storage):
        make_admin()
        product = make_product()

        response = client.put(f"/admin/products/{product.id}/image", files=IMAGE, headers=auth("admin"))

        assert response.status_code == 200
        assert response.json()["image"].endswith("1-sofa.jpg")
        assert storage.deleted == ["chic-chair.jpg"]

    def test_delete_product(self, client: TestClient, make_admin, make_product, storage):
        make_admin()
        product = make_product()

        response = client.delete(f"/admin/products/{product.id}", headers=auth("admin"))

        assert response.status_code == 200
        assert response.json() == {"message": "product removed"}
        assert storage.deleted == ["chic-chair.jpg"]
        assert client.get(f"/products/{product.id}").status_code == 404

    def test_delete_reprices_carts_holding_the_product(self, client: TestClient, make_admin, make_product):
        make_admin()
        gone = make_product("chic chair", price="10.00")
        kept = make_product("desk lamp", price="4.00")
        client.post("/cart/items", json={"product_id": gone.id, "quantity": 2}, headers=auth("alice"))
        client.post("/cart/items", json={"product_id": kept.id, "quantity": 1}, headers=auth("alice"))
        client.post("/cart/items", json={"product_id": gone.id, "quantity": 1}, headers=auth("bob"))

        assert client.delete(f"/admin/products/{gone.id}", headers=auth("admin")).status_code == 200

        assert client.get("/cart/count", headers=auth("alice")).json() == {"num_items": 1}
        assert client.get("/cart/count", headers=auth("bob")).json() == {"num_items": 0}
        cart = client.get("/cart", headers=auth("alice")).json()
        assert [i["product_id"] for i in cart["items"]] == [kept.id]
        assert Decimal(cart["cart_total"]) == Decimal("4.00")
        empty = client.get("/cart", headers=auth("bob")).json()
        assert empty["items"] == []
        assert Decimal(empty["order_total"]) == Decimal("0.00")

    def test_delete_drops_favorites_and_reviews(self, client: TestClient, make_admin, make_product):
        make_admin()
        product = make_product()
        client.post(f"/favorites/{product.id}/toggle", headers=auth())
        client.post(
            "/reviews",
            json={"product_id": product.id, "author_name": "Alice", "rating": 5, "comment": "Lovely chair, very sturdy."},
            headers=auth(),
        )

        client.delete(f"/admin/products/{product.id}", headers=auth("admin"))

        assert client.get("/favorites", headers=auth()).json() == []
        assert client.get("/reviews", headers=auth()).json() == []

    def test_price_change_shows_up_in_cart(self, client: TestClient, make_admin, make_product):
        make_admin()
        product = make_product(price="10.00")
        client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=auth())

        client.put(f"/admin/products/{product.id}", data=product_form(price="20.00"), headers=auth("admin"))

        assert Decimal(client.get("/cart", headers=auth()).json()["cart_total"]) == Decimal("40.00")


class TestReviews:

    @staticmethod
    def review(product_id, rating=5):
        return {
            "product_id": product_id,
            "author_name": "Alice",
            "rating": rating,
            "comment": "Sturdy and comfortable, would buy again.",
        }

    def test_create_and_rate(self, client: TestClient, make_product):
        product = make_product()

        assert client.post("/reviews", json=self.review(product.id, 4), headers=auth("alice")).status_code == 201
        assert client.post("/reviews", json=self.review(product.id, 5), headers=auth("bob")).status_code == 201

        assert client.get(f"/products/{product.id}/rating").json() == {"rating": 4.5, "count": 2}
        assert len(client.get(f"/products/{product.id}/reviews").json()) == 2

    def test_unrated_product(self, client: TestClient, make_product):
        product = make_product()

        assert client.get(f"/products/{product.id}/rating").json() == {"rating": 0, "count": 0}

    def test_second_review_is_rejected(self, client: TestClient, make_product):
        product = make_product()
        client.post("/reviews", json=self.review(product.id), headers=auth())

        response = client.post("/reviews", json=self.review(product.id), headers=auth())

        assert response.status_code == 400
        assert response.json() == {"message": "You have already reviewed this product"}

    def test_rating_out_of_range(self, client: TestClient, make_product):
        product = make_product()

        response = client.post("/reviews", json=self.review(product.id, 6), headers=auth())

        assert response.status_code == 400

    def test_my_reviews(self, client: TestClient, make_product):
        product = make_product()
        client.post("/reviews", json=self.review(product.id), headers=auth())

        body = client.get("/reviews", headers=auth()).json()

        assert len(body) == 1
        assert body[0]["product_name"] == "chic chair"

    def test_only_author_can_delete(self, client: TestClient, make_product):
        product = make_product()
        review_id = client.post("/reviews", json=self.review(product.id), headers=auth("alice")).json()["id"]

        assert client.delete(f"/reviews/{review_id}", headers=auth("bob")).status_code == 404

        response = client.delete(f"/reviews/{review_id}", headers=auth("alice"))
        assert response.status_code == 200
        assert client.get(f"/products/{product.id}/reviews").json() == []


class TestFavorites:

    def test_toggle(self, client: TestClient, make_product):
        product = make_product()

        first = client.post(f"/favorites/{product.id}/toggle", headers=auth()).json()
        assert first["favorite"] is True
        favorites = client.get("/favorites", headers=auth()).json()
        assert [f["product"]["id"] for f in favorites] == [product.id]
        assert client.get(f"/products/{product.id}/favorite", headers=auth()).json()["favorite_id"] == favorites[0]["id"]

        second = client.post(f"/favorites/{product.id}/toggle", headers=auth()).json()
        assert second["favorite"] is False
        assert client.get("/favorites", headers=auth()).json() == []

    def test_toggle_missing_product(self, client: TestClient):
        assert client.post("/favorites/999/toggle", headers=auth()).status_code == 404


class TestAdminUsersAndOrders:

    def test_grant_admin_role(self, client: TestClient, make_admin, make_user):
        make_admin()
        make_user("bob")

        response = client.put("/admin/users/bob/role", json={"role": "admin"}, headers=auth("admin"))

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert client.get("/admin/products", headers=auth("bob")).status_code == 200

    def test_unknown_role(self, client: TestClient, make_admin, make_user):
        make_admin()
        make_user("bob")

        response = client.put("/admin/users/bob/role", json={"role": "owner"}, headers=auth("admin"))

        assert response.status_code == 400

    def test_admin_sees_paid_orders_of_everyone(self, client: TestClient, make_admin, make_product):
        make_admin()
        product = make_product()
        for user in ("alice", "bob"):
            client.post("/cart/items", json={"product_id": product.id, "quantity": 1}, headers=auth(user))
            order_id = client.post("/orders/checkout", headers=auth(user)).json()["order_id"]
            client.post(f"/orders/{order_id}/confirm", headers=payment_step())

        orders = client.get("/admin/orders", headers=auth("admin")).json()

        assert sorted(o["user_id"] for o in orders) == ["alice", "bob"]


class TestHealth:

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}

    def test_startup_creates_tables(self):
        with patch("storefront.main.init_db") as init_db:
            with TestClient(app) as started:
                assert started.get("/").json() == {"service": "storefront", "status": "ok"}

        init_db.assert_called_once_with()
