from __future__ import annotations

from typing import Any

from shop_api_tester.apis import AuthApi, CartApi, CategoriesApi, ProductsApi, ShopsApi, UsersApi
from shop_api_tester.apis.cart_api import find_cart_item, next_quantity
from shop_api_tester.config import AppSettings
from shop_api_tester.credentials import ACCESS_TOKEN, USER_ID, CredentialStore, build_credential_store
from shop_api_tester.http import RequestClient
from shop_api_tester.models import ApiResult, Credentials


class AuthenticationError(RuntimeError):
    pass


class ShopApiService:
    def __init__(
        self,
        store: CredentialStore,
        auth_api: AuthApi,
        users_api: UsersApi,
        categories_api: CategoriesApi,
        shops_api: ShopsApi,
        products_api: ProductsApi,
        cart_api: CartApi,
        base_url: str,
    ):
        self._store = store
        self._auth_api = auth_api
        self._users_api = users_api
        self._categories_api = categories_api
        self._shops_api = shops_api
        self._products_api = products_api
        self._cart_api = cart_api
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    def credentials(self) -> Credentials:
        return self._store.snapshot()

    def login(self, payload: dict[str, Any]) -> ApiResult:
        return self._auth_api.login(str(payload.get("phone", "")), str(payload.get("password", "")))

    def logout(self, _payload: Any = None) -> ApiResult:
        return self._auth_api.logout()

    def refresh_token(self, _payload: Any = None) -> ApiResult:
        return self._auth_api.refresh_token()

    def verify_otp(self, payload: dict[str, Any]) -> ApiResult:
        return self._auth_api.verify_otp(str(payload.get("phone", "")), str(payload.get("otp", "")))

    def register_user(self, payload: dict[str, Any]) -> ApiResult:
        return self._users_api.register(payload)

    def get_current_user(self, _payload: Any = None) -> ApiResult:
        token = self._require_token("Please log in to load your user.")
        return self._users_api.get_user(token, self._require_user_id())

    def update_current_user(self, payload: dict[str, Any]) -> ApiResult:
        token = self._require_token("Please log in to update your user.")
        return self._users_api.update_user(token, self._require_user_id(), payload)

    def list_users(self, payload: dict[str, Any] | None = None) -> ApiResult:
        token = self._require_token("Please log in to list users.")
        payload = payload or {}
        return self._users_api.list_users(
            token,
            page=int(payload.get("page", 1)),
            limit=int(payload.get("limit", 10)),
        )

    def list_categories(self, _payload: Any = None) -> ApiResult:
        return self._categories_api.list_categories()

    def create_category(self, payload: dict[str, Any]) -> ApiResult:
        return self._categories_api.create_category(
            self._store.get(ACCESS_TOKEN),
            str(payload.get("name", "")),
            str(payload.get("description", "")),
        )

    def list_shops(self, _payload: Any = None) -> ApiResult:
        token = self._require_token("Please log in to view shops.")
        return self._shops_api.list_shops(token)

    def create_shop(self, payload: dict[str, Any]) -> ApiResult:
        token = self._require_token("Please log in to create a shop.")
        shop = dict(payload)
        if not str(shop.get("userId") or "").strip():
            shop["userId"] = self._require_user_id()
        return self._shops_api.create_shop(token, shop)

    def list_products(self, _payload: Any = None) -> ApiResult:
        return self._products_api.list_products()

    def create_product(self, payload: dict[str, Any]) -> ApiResult:
        return self._products_api.create_product(self._store.get(ACCESS_TOKEN), payload)

    def get_cart(self, cart_id: str) -> ApiResult:
        token = self._require_token("Please log in to view your cart.")
        return self._cart_api.get_cart(token, cart_id)

    def clear_cart(self, cart_id: str) -> ApiResult:
        token = self._require_token("Please log in to clear your cart.")
        return self._cart_api.clear_cart(token, cart_id)

    def remove_cart_item(self, item_id: str) -> ApiResult:
        token = self._require_token("Please log in to change your cart.")
        return self._cart_api.remove_item(token, item_id)

    def update_cart_item_quantity(self, payload: dict[str, Any]) -> ApiResult:
        token = self._require_token("Please log in to change your cart.")
        item_id = str(payload.get("cartItemId", ""))
        return self._cart_api.update_item_quantity(token, item_id, self._resolve_cart_quantity(payload, item_id))

    @staticmethod
    def _resolve_cart_quantity(payload: dict[str, Any], item_id: str) -> int:
        """Target quantity, bounded by the stock of the item in a loaded cart.

        Without a loaded ``cart`` the requested ``quantity`` is taken as is.
        With one, either ``change`` or ``quantity`` must keep the item
        between 1 and its product stock.
        """
        cart = payload.get("cart")
        if cart is None:
            return int(payload.get("quantity", 0))

        item = find_cart_item(cart, item_id)
        if item is None:
            raise ValueError(f"Cart item {item_id} is not in the loaded cart")

        if "change" in payload:
            change = int(payload["change"])
        else:
            change = int(payload.get("quantity", 0)) - int(item.get("quantity") or 0)
        quantity = next_quantity(item, change)
        if quantity is None:
            raise ValueError("Quantity must stay between 1 and the product stock")
        return quantity

    def _require_token(self, message: str) -> str:
        token = self._store.get(ACCESS_TOKEN)
        if not token:
            raise AuthenticationError(message)
        return token

    def _require_user_id(self) -> str:
        user_id = self._store.get(USER_ID)
        if not user_id:
            raise AuthenticationError("No user id stored. Please log in again.")
        return user_id


def build_service(settings: AppSettings) -> ShopApiService:
    store = build_credential_store(settings)
    http_client = RequestClient(settings, store)
    return ShopApiService(
        store=store,
        auth_api=AuthApi(http_client, store),
        users_api=UsersApi(http_client),
        categories_api=CategoriesApi(http_client),
        shops_api=ShopsApi(http_client),
        products_api=ProductsApi(http_client),
        cart_api=CartApi(http_client),
        base_url=settings.base_url,
    )
