"""
Unit tests for the per-resource API wrappers.

The RequestClient is replaced by a MagicMock so each test checks the
request a wrapper builds and what it does with the envelope.
"""

from unittest.mock import MagicMock

import pytest

from shop_api_tester.apis import AuthApi, CartApi, CategoriesApi, ProductsApi, ShopsApi, UsersApi
from shop_api_tester.apis.cart_api import cart_total, find_cart_item, next_quantity
from shop_api_tester.apis.products_api import build_product_payload
from shop_api_tester.credentials import ACCESS_TOKEN, REFRESH_TOKEN, USER_ID, MemoryCredentialStore
from shop_api_tester.http import RequestClient
from shop_api_tester.models import SUCCESS_SENTINEL, Credentials, Failure, Success


@pytest.fixture
def http_client():
    return MagicMock(spec=RequestClient)


class TestAuthApi:
    def test_login_persists_credentials(self, http_client):
        store = MemoryCredentialStore()
        http_client.send.return_value = Success(
            {
                "user": {"id": "u1", "username": "jane"},
                "tokens": {"accessToken": "a1", "refreshToken": "r1"},
            }
        )

        result = AuthApi(http_client, store).login(" 0700000000 ", "pw")

        assert result.success is True
        http_client.send.assert_called_once_with(
            "/auth/login", "POST", {"phone": "0700000000", "password": "pw"}
        )
        assert store.snapshot() == Credentials(access_token="a1", refresh_token="r1", user_id="u1")

    def test_login_failure_leaves_store_untouched(self, http_client):
        store = MemoryCredentialStore({ACCESS_TOKEN: "old"})
        http_client.send.return_value = Failure("Bad request. Please check your request parameters.")

        result = AuthApi(http_client, store).login("0700000000", "wrong")

        assert result.success is False
        assert store.get(ACCESS_TOKEN) == "old"

    def test_login_requires_phone_and_password(self, http_client):
        with pytest.raises(ValueError):
            AuthApi(http_client, MemoryCredentialStore()).login("", "pw")
        http_client.send.assert_not_called()

    def test_logout_clears_store_even_on_failure(self, http_client):
        store = MemoryCredentialStore({ACCESS_TOKEN: "a1", REFRESH_TOKEN: "r1", USER_ID: "u1"})
        http_client.send.return_value = Failure("HTTP error! status: 500")

        result = AuthApi(http_client, store).logout()

        assert result.success is False
        http_client.send.assert_called_once_with("/auth/logout", "POST", {"refreshToken": "r1"})
        assert store.snapshot() == Credentials()

    def test_manual_refresh_persists_tokens(self, http_client):
        store = MemoryCredentialStore({ACCESS_TOKEN: "a1", REFRESH_TOKEN: "r1", USER_ID: "u1"})
        http_client.send.return_value = Success({"accessToken": "a2", "refreshToken": "r2"})

        AuthApi(http_client, store).refresh_token()

        http_client.send.assert_called_once_with(
            "/auth/refresh-token", "POST", {"userId": "u1", "refreshToken": "r1"}
        )
        assert store.get(ACCESS_TOKEN) == "a2"
        assert store.get(REFRESH_TOKEN) == "r2"

    def test_verify_otp(self, http_client):
        http_client.send.return_value = Success(SUCCESS_SENTINEL)

        AuthApi(http_client, MemoryCredentialStore()).verify_otp("0700000000", " 123456 ")

        http_client.send.assert_called_once_with(
            "/auth/verify-otp", "POST", {"phone": "0700000000", "otp": "123456"}
        )


class TestUsersApi:
    def test_register_sends_required_fields(self, http_client):
        user = {"username": "jane", "password": "pw", "phone": "07", "role": "seller", "id": ""}

        UsersApi(http_client).register(user)

        http_client.send.assert_called_once_with(
            "/users/register",
            "POST",
            {"username": "jane", "password": "pw", "phone": "07", "role": "seller"},
        )

    def test_register_rejects_missing_fields(self, http_client):
        with pytest.raises(ValueError, match="password"):
            UsersApi(http_client).register({"username": "jane", "phone": "07", "role": "buyer"})
        http_client.send.assert_not_called()

    def test_register_rejects_unknown_role(self, http_client):
        with pytest.raises(ValueError, match="Role"):
            UsersApi(http_client).register({"username": "j", "password": "p", "phone": "0", "role": "root"})

    def test_update_drops_read_only_and_empty_fields(self, http_client):
        user = {
            "id": "u1",
            "username": "jane",
            "password": "secret",
            "phone": "",
            "role": "admin",
            "createdAt": "2024-01-01",
            "updatedAt": "2024-01-02",
        }

        UsersApi(http_client).update_user("a1", "u1", user)

        http_client.send.assert_called_once_with(
            "/users/u1", "PATCH", {"username": "jane", "role": "admin"}, "a1"
        )

    def test_list_users_builds_query(self, http_client):
        UsersApi(http_client).list_users("a1")

        http_client.send.assert_called_once_with("/users?page=1&limit=10", "GET", None, "a1")

    def test_get_user_quotes_id(self, http_client):
        UsersApi(http_client).get_user("a1", "abc/def")

        http_client.send.assert_called_once_with("/users/abc%2Fdef", "GET", None, "a1")


class TestCategoriesAndShops:
    def test_list_categories_without_token(self, http_client):
        CategoriesApi(http_client).list_categories()

        http_client.send.assert_called_once_with("/categories", "GET")

    def test_create_category(self, http_client):
        CategoriesApi(http_client).create_category("a1", " Shoes ", "Footwear")

        http_client.send.assert_called_once_with(
            "/categories", "POST", {"name": "Shoes", "description": "Footwear"}, "a1"
        )

    def test_create_category_requires_name(self, http_client):
        with pytest.raises(ValueError):
            CategoriesApi(http_client).create_category("a1", "  ")

    def test_create_shop_payload(self, http_client):
        shop = {"userId": "u1", "desc": "Corner shop", "street": "Main St", "name": ""}

        ShopsApi(http_client).create_shop("a1", shop)

        http_client.send.assert_called_once_with(
            "/shops",
            "POST",
            {
                "desc": "Corner shop",
                "street": "Main St",
                "businessType": "",
                "buildingName": "",
                "shopNumber": "",
                "userId": "u1",
            },
            "a1",
        )

    def test_list_shops(self, http_client):
        ShopsApi(http_client).list_shops("a1")

        http_client.send.assert_called_once_with("/shops", "GET", None, "a1")


class TestProducts:
    def test_build_product_payload_converts_types(self):
        payload = build_product_payload(
            {
                "name": "Sneaker",
                "quantity": "12",
                "minPurchase": "x",
                "categoryId": "3",
                "mktPrice": "1999.5",
                "sellingPrice": "",
                "colors": "red, blue ,,green",
            }
        )

        assert payload["quantity"] == 12
        assert payload["minPurchase"] == 0
        assert payload["categoryId"] == 3
        assert payload["mktPrice"] == 1999.5
        assert payload["sellingPrice"] == 0.0
        assert payload["colors"] == ["red", "blue", "green"]
        assert payload["shopId"] == ""

    def test_create_product(self, http_client):
        ProductsApi(http_client).create_product(None, {"name": "Sneaker", "colors": ["red"]})

        endpoint, method, body, token = http_client.send.call_args.args
        assert (endpoint, method, token) == ("/products", "POST", None)
        assert body["colors"] == ["red"]

    def test_create_product_requires_name(self, http_client):
        with pytest.raises(ValueError):
            ProductsApi(http_client).create_product("a1", {"quantity": "1"})


class TestCartApi:
    def test_requests(self, http_client):
        api = CartApi(http_client)

        api.get_cart("a1", "c1")
        api.clear_cart("a1", "c1")
        api.remove_item("a1", "i1")
        api.update_item_quantity("a1", "i1", 3)

        calls = [call.args for call in http_client.send.call_args_list]
        assert calls == [
            ("/cart/c1", "GET", None, "a1"),
            ("/cart/clear/c1", "PUT", None, "a1"),
            ("/cart/items/i1", "DELETE", {"cartItemId": "i1"}, "a1"),
            ("/cart/items/i1", "PATCH", {"cartItemId": "i1", "quantity": 3}, "a1"),
        ]

    def test_update_rejects_non_positive_quantity(self, http_client):
        with pytest.raises(ValueError):
            CartApi(http_client).update_item_quantity("a1", "i1", 0)

    def test_cart_total(self):
        cart = {"items": [{"amount": 100, "quantity": 2}, {"amount": 49.5, "quantity": 1}]}

        assert cart_total(cart) == 249.5
        assert cart_total(None) == 0.0

    def test_next_quantity_bounds(self):
        item = {"quantity": 2, "product": {"quantity": 3}}

        assert next_quantity(item, 1) == 3
        assert next_quantity({"quantity": 3, "product": {"quantity": 3}}, 1) is None
        assert next_quantity({"quantity": 1, "product": {"quantity": 3}}, -1) is None

    def test_find_cart_item(self):
        cart = {"items": [{"id": 7, "quantity": 1}, "junk", {"id": "i2", "quantity": 4}]}

        assert find_cart_item(cart, "7") == {"id": 7, "quantity": 1}
        assert find_cart_item(cart, "i2")["quantity"] == 4
        assert find_cart_item(cart, "missing") is None
        assert find_cart_item(None, "7") is None
