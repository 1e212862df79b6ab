from __future__ import annotations

import logging
import threading
import traceback

import customtkinter as ctk

from shop_api_tester.apis.cart_api import find_cart_item
from shop_api_tester.apis.users_api import USER_ROLES
from shop_api_tester.config import AppSettings, ConfigurationError
from shop_api_tester.endpoints import render_api_reference
from shop_api_tester.formatting import render_raw, summarize
from shop_api_tester.logging_utils import configure_logging
from shop_api_tester.models import Success, unwrap_body
from shop_api_tester.services import ShopApiService, build_service

logger = logging.getLogger(__name__)

ERROR_COLOR = "#d14343"
OK_COLOR = "#2f9e44"

PRODUCT_FIELDS = (
	("name", "Name"),
	("brand", "Brand"),
	("quantity", "Quantity"),
	("minPurchase", "Min purchase"),
	("mktPrice", "Market price"),
	("sellingPrice", "Selling price"),
	("size", "Size"),
	("colors", "Colors (comma separated)"),
	("shopId", "Shop ID"),
	("categoryId", "Category ID"),
	("description", "Description"),
	("img", "Image URL"),
)

SHOP_FIELDS = (
	("userId", "Owner user ID (defaults to you)"),
	("name", "Name"),
	("desc", "Description"),
	("street", "Street"),
	("businessType", "Business type"),
	("buildingName", "Building name"),
	("shopNumber", "Shop number"),
)


class MainWindow(ctk.CTk):
	def __init__(self, service: ShopApiService):
		super().__init__()
		self._service = service
		self.title("Shop API Tester")
		self.geometry("1100x820")
		self.minsize(960, 700)

		self._status_label = ctk.CTkLabel(self, text="Not signed in")
		self._status_label.pack(anchor="w", padx=16, pady=(16, 4))

		self._notification_label = ctk.CTkLabel(self, text="")
		self._notification_label.pack(anchor="w", padx=16, pady=(0, 8))

		self._tabview = ctk.CTkTabview(self)
		self._tabview.pack(fill="both", expand=True, padx=16, pady=(0, 16))
		for name in ("Auth & User", "Categories", "Shops", "Products", "Cart", "API Docs"):
			self._tabview.add(name)

		self._build_auth_tab(self._tabview.tab("Auth & User"))
		self._build_categories_tab(self._tabview.tab("Categories"))
		self._build_shops_tab(self._tabview.tab("Shops"))
		self._build_products_tab(self._tabview.tab("Products"))
		self._build_cart_tab(self._tabview.tab("Cart"))
		self._build_docs_tab(self._tabview.tab("API Docs"))

		self._refresh_auth_state()

	def _build_auth_tab(self, tab):
		login_row = ctk.CTkFrame(tab)
		login_row.pack(fill="x", padx=12, pady=(12, 6))

		self._login_phone = ctk.CTkEntry(login_row, placeholder_text="Phone")
		self._login_phone.pack(side="left", padx=(8, 6), pady=8)
		self._login_password = ctk.CTkEntry(login_row, placeholder_text="Password", show="*")
		self._login_password.pack(side="left", padx=6, pady=8)

		ctk.CTkButton(login_row, text="Login", width=90, command=self._login).pack(side="left", padx=6, pady=8)
		self._logout_btn = ctk.CTkButton(login_row, text="Logout", width=90, command=self._logout)
		self._logout_btn.pack(side="left", padx=6, pady=8)
		self._refresh_btn = ctk.CTkButton(
			login_row,
			text="Refresh Token",
			width=120,
			command=self._refresh_token,
		)
		self._refresh_btn.pack(side="left", padx=6, pady=8)

		otp_row = ctk.CTkFrame(tab)
		otp_row.pack(fill="x", padx=12, pady=6)
		self._otp_code = ctk.CTkEntry(otp_row, placeholder_text="OTP code (uses the phone above)")
		self._otp_code.pack(side="left", fill="x", expand=True, padx=(8, 6), pady=8)
		ctk.CTkButton(otp_row, text="Verify OTP", width=120, command=self._verify_otp).pack(
			side="left", padx=6, pady=8
		)

		user_row = ctk.CTkFrame(tab)
		user_row.pack(fill="x", padx=12, pady=6)
		self._user_username = ctk.CTkEntry(user_row, placeholder_text="Username")
		self._user_username.pack(side="left", padx=(8, 6), pady=8)
		self._user_password = ctk.CTkEntry(user_row, placeholder_text="Password", show="*")
		self._user_password.pack(side="left", padx=6, pady=8)
		self._user_phone = ctk.CTkEntry(user_row, placeholder_text="Phone")
		self._user_phone.pack(side="left", padx=6, pady=8)
		self._user_role = ctk.StringVar(value=USER_ROLES[0])
		ctk.CTkSegmentedButton(user_row, values=list(USER_ROLES), variable=self._user_role).pack(
			side="left", padx=6, pady=8
		)

		user_actions = ctk.CTkFrame(tab)
		user_actions.pack(fill="x", padx=12, pady=(0, 6))
		for text, command in (
			("Register User", self._register_user),
			("Get User", self._get_user),
			("Update User", self._update_user),
			("Get All Users", self._list_users),
		):
			ctk.CTkButton(user_actions, text=text, width=130, command=command).pack(side="left", padx=(8, 0), pady=8)

		self._auth_summary_output, self._auth_raw_output = self._create_output_panes(tab, height=300)

	def _build_categories_tab(self, tab):
		form = ctk.CTkFrame(tab)
		form.pack(fill="x", padx=12, pady=(12, 6))
		self._category_name = ctk.CTkEntry(form, placeholder_text="Category name (required)")
		self._category_name.pack(fill="x", padx=8, pady=(8, 4))
		self._category_description = ctk.CTkEntry(form, placeholder_text="Description")
		self._category_description.pack(fill="x", padx=8, pady=4)

		actions = ctk.CTkFrame(tab)
		actions.pack(fill="x", padx=12, pady=(0, 6))
		ctk.CTkButton(actions, text="Add Category", command=self._create_category).pack(side="left", padx=8, pady=8)
		ctk.CTkButton(actions, text="Load Categories", command=self._list_categories).pack(
			side="left", padx=8, pady=8
		)

		self._categories_summary_output, self._categories_raw_output = self._create_output_panes(tab, height=420)

	def _build_shops_tab(self, tab):
		self._shop_entries = self._create_form(tab, SHOP_FIELDS, columns=2)

		actions = ctk.CTkFrame(tab)
		actions.pack(fill="x", padx=12, pady=(0, 6))
		ctk.CTkButton(actions, text="Create Shop", command=self._create_shop).pack(side="left", padx=8, pady=8)
		ctk.CTkButton(actions, text="Load Shops", command=self._list_shops).pack(side="left", padx=8, pady=8)

		self._shops_summary_output, self._shops_raw_output = self._create_output_panes(tab, height=320)

	def _build_products_tab(self, tab):
		self._product_entries = self._create_form(tab, PRODUCT_FIELDS, columns=3)

		actions = ctk.CTkFrame(tab)
		actions.pack(fill="x", padx=12, pady=(0, 6))
		ctk.CTkButton(actions, text="Create Product", command=self._create_product).pack(
			side="left", padx=8, pady=8
		)
		ctk.CTkButton(actions, text="Load Products", command=self._list_products).pack(
			side="left", padx=8, pady=8
		)

		self._products_summary_output, self._products_raw_output = self._create_output_panes(tab, height=300)

	def _build_cart_tab(self, tab):
		form = ctk.CTkFrame(tab)
		form.pack(fill="x", padx=12, pady=(12, 6))
		self._cart_id = ctk.CTkEntry(form, placeholder_text="Cart ID (required)")
		self._cart_id.pack(side="left", padx=(8, 6), pady=8)
		self._cart_item_id = ctk.CTkEntry(form, placeholder_text="Cart item ID")
		self._cart_item_id.pack(side="left", padx=6, pady=8)
		self._cart_quantity = ctk.CTkEntry(form, placeholder_text="Quantity", width=90)
		self._cart_quantity.pack(side="left", padx=6, pady=8)

		self._loaded_cart: dict | None = None

		self._cart_validation_label = ctk.CTkLabel(tab, text="", text_color=ERROR_COLOR)
		self._cart_validation_label.pack(anchor="w", padx=12, pady=(0, 4))

		actions = ctk.CTkFrame(tab)
		actions.pack(fill="x", padx=12, pady=(0, 6))
		for text, command in (
			("Refresh Cart", self._get_cart),
			("Clear Cart", self._clear_cart),
			("+1", lambda: self._change_cart_item(1)),
			("-1", lambda: self._change_cart_item(-1)),
			("Update Quantity", self._update_cart_item),
			("Remove Item", self._remove_cart_item),
		):
			ctk.CTkButton(actions, text=text, width=130, command=command).pack(side="left", padx=(8, 0), pady=8)

		self._cart_summary_output, self._cart_raw_output = self._create_output_panes(tab, height=400)

	def _build_docs_tab(self, tab):
		docs = ctk.CTkTextbox(tab, font=("Courier", 13))
		docs.pack(fill="both", expand=True, padx=12, pady=12)
		docs.insert("1.0", render_api_reference(self._service.base_url))
		docs.configure(state="disabled")

	def _create_form(self, parent, fields, columns: int) -> dict[str, ctk.CTkEntry]:
		container = ctk.CTkFrame(parent)
		container.pack(fill="x", padx=12, pady=(12, 6))
		for column in range(columns):
			container.grid_columnconfigure(column, weight=1)

		entries: dict[str, ctk.CTkEntry] = {}
		for index, (key, label) in enumerate(fields):
			entry = ctk.CTkEntry(container, placeholder_text=label)
			entry.grid(row=index // columns, column=index % columns, sticky="ew", padx=6, pady=4)
			entries[key] = entry
		return entries

	def _create_output_panes(self, parent, height: int):
		container = ctk.CTkFrame(parent)
		container.pack(fill="both", expand=True, padx=12, pady=(4, 12))
		container.grid_columnconfigure(0, weight=1)
		container.grid_columnconfigure(1, weight=1)
		container.grid_rowconfigure(1, weight=1)

		summary_label = ctk.CTkLabel(container, text="Summary")
		summary_label.grid(row=0, column=0, sticky="w", padx=(8, 6), pady=(8, 4))

		raw_label = ctk.CTkLabel(container, text="API Response")
		raw_label.grid(row=0, column=1, sticky="w", padx=(6, 8), pady=(8, 4))

		summary_widget = ctk.CTkTextbox(container, height=height)
		summary_widget.grid(row=1, column=0, sticky="nsew", padx=(8, 6), pady=(0, 8))

		raw_widget = ctk.CTkTextbox(container, height=height)
		raw_widget.grid(row=1, column=1, sticky="nsew", padx=(6, 8), pady=(0, 8))

		return summary_widget, raw_widget

	def _run_in_background(
		self,
		summary_widget: ctk.CTkTextbox,
		raw_widget: ctk.CTkTextbox,
		call,
		payload,
		title: str,
		on_success=None,
	):
		self._render_output(summary_widget, "Running request...")
		self._render_output(raw_widget, "Running request...")

		def worker():
			succeeded = False
			try:
				result = call(payload)
				raw_rendered = render_raw(result)
				summary_rendered = summarize(result)
				succeeded = result.success
				message = f"{title} succeeded" if succeeded else f"{title} failed: {result.error}"
				if succeeded and on_success:
					self.after(0, lambda: on_success(result))
			except Exception as exc:
				logger.debug("%s raised", title, exc_info=True)
				raw_rendered = f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}"
				summary_rendered = f"{type(exc).__name__}: {exc}"
				message = f"{title} failed: {exc}"

			self.after(
				0,
				lambda: (
					self._render_output(summary_widget, summary_rendered),
					self._render_output(raw_widget, raw_rendered),
					self._notify(message, is_error=not succeeded),
					self._refresh_auth_state(),
				),
			)

		threading.Thread(target=worker, daemon=True).start()

	@staticmethod
	def _render_output(text_widget: ctk.CTkTextbox, text: str):
		text_widget.delete("1.0", "end")
		text_widget.insert("1.0", text)

	def _notify(self, message: str, is_error: bool):
		self._notification_label.configure(text=message, text_color=ERROR_COLOR if is_error else OK_COLOR)

	def _refresh_auth_state(self):
		try:
			credentials = self._service.credentials()
		except Exception as exc:
			self._status_label.configure(text=f"Could not read stored credentials: {exc}")
			return

		if credentials.is_signed_in:
			user = credentials.user_id or "unknown user"
			self._status_label.configure(text=f"Signed in | User ID: {user}")
		else:
			self._status_label.configure(text="Not signed in")

		state = "normal" if credentials.refresh_token else "disabled"
		self._logout_btn.configure(state=state)
		self._refresh_btn.configure(state=state)

	def _auth_output(self):
		return self._auth_summary_output, self._auth_raw_output

	def _login(self):
		payload = {"phone": self._login_phone.get().strip(), "password": self._login_password.get()}
		self._run_in_background(*self._auth_output(), self._service.login, payload, "Login")

	def _logout(self):
		def on_logout(_result):
			self._login_phone.delete(0, "end")
			self._login_password.delete(0, "end")

		self._run_in_background(*self._auth_output(), self._service.logout, None, "Logout", on_success=on_logout)

	def _refresh_token(self):
		self._run_in_background(*self._auth_output(), self._service.refresh_token, None, "Token refresh")

	def _verify_otp(self):
		payload = {"phone": self._login_phone.get().strip(), "otp": self._otp_code.get().strip()}
		self._run_in_background(*self._auth_output(), self._service.verify_otp, payload, "OTP verification")

	def _user_form(self) -> dict[str, str]:
		return {
			"username": self._user_username.get().strip(),
			"password": self._user_password.get(),
			"phone": self._user_phone.get().strip(),
			"role": self._user_role.get(),
		}

	def _register_user(self):
		self._run_in_background(*self._auth_output(), self._service.register_user, self._user_form(), "Registration")

	def _get_user(self):
		self._run_in_background(
			*self._auth_output(),
			self._service.get_current_user,
			None,
			"Get user",
			on_success=self._fill_user_form,
		)

	def _fill_user_form(self, result: Success):
		user = unwrap_body(result.data)
		if not isinstance(user, dict):
			user = {}
		for entry, key in ((self._user_username, "username"), (self._user_phone, "phone")):
			entry.delete(0, "end")
			entry.insert(0, str(user.get(key) or ""))
		# never populate the password field from a response
		self._user_password.delete(0, "end")
		if user.get("role") in USER_ROLES:
			self._user_role.set(user["role"])

	def _update_user(self):
		self._run_in_background(
			*self._auth_output(),
			self._service.update_current_user,
			self._user_form(),
			"Update user",
		)

	def _list_users(self):
		self._run_in_background(*self._auth_output(), self._service.list_users, {"page": 1, "limit": 10}, "Get users")

	def _create_category(self):
		payload = {
			"name": self._category_name.get().strip(),
			"description": self._category_description.get().strip(),
		}

		def on_created(_result):
			self._category_name.delete(0, "end")
			self._category_description.delete(0, "end")

		self._run_in_background(
			self._categories_summary_output,
			self._categories_raw_output,
			self._service.create_category,
			payload,
			"Create category",
			on_success=on_created,
		)

	def _list_categories(self):
		self._run_in_background(
			self._categories_summary_output,
			self._categories_raw_output,
			self._service.list_categories,
			None,
			"Load categories",
		)

	def _create_shop(self):
		payload = {key: entry.get().strip() for key, entry in self._shop_entries.items()}
		self._run_in_background(
			self._shops_summary_output,
			self._shops_raw_output,
			self._service.create_shop,
			payload,
			"Create shop",
		)

	def _list_shops(self):
		self._run_in_background(
			self._shops_summary_output,
			self._shops_raw_output,
			self._service.list_shops,
			None,
			"Load shops",
		)

	def _create_product(self):
		payload = {key: entry.get().strip() for key, entry in self._product_entries.items()}
		self._run_in_background(
			self._products_summary_output,
			self._products_raw_output,
			self._service.create_product,
			payload,
			"Create product",
		)

	def _list_products(self):
		self._run_in_background(
			self._products_summary_output,
			self._products_raw_output,
			self._service.list_products,
			None,
			"Load products",
		)

	def _cart_output(self):
		return self._cart_summary_output, self._cart_raw_output

	def _require_cart_field(self, entry: ctk.CTkEntry, label: str) -> str | None:
		value = entry.get().strip()
		if not value:
			self._cart_validation_label.configure(text=f"Please fill in the required {label} field.")
			return None
		self._cart_validation_label.configure(text="")
		return value

	def _get_cart(self):
		cart_id = self._require_cart_field(self._cart_id, "Cart ID")
		if cart_id:
			self._run_in_background(
				*self._cart_output(),
				self._service.get_cart,
				cart_id,
				"Load cart",
				on_success=self._remember_cart,
			)

	def _remember_cart(self, result: Success):
		cart = unwrap_body(result.data)
		self._loaded_cart = cart if isinstance(cart, dict) else None

	def _clear_cart(self):
		cart_id = self._require_cart_field(self._cart_id, "Cart ID")
		if not cart_id:
			return

		def on_cleared(_result):
			self._loaded_cart = None

		self._run_in_background(
			*self._cart_output(),
			self._service.clear_cart,
			cart_id,
			"Clear cart",
			on_success=on_cleared,
		)

	def _remove_cart_item(self):
		item_id = self._require_cart_field(self._cart_item_id, "Cart item ID")
		if not item_id:
			return

		def on_removed(_result):
			if self._loaded_cart is not None:
				self._loaded_cart["items"] = [
					item for item in self._loaded_cart.get("items") or [] if str(item.get("id")) != item_id
				]

		self._run_in_background(
			*self._cart_output(),
			self._service.remove_cart_item,
			item_id,
			"Remove item",
			on_success=on_removed,
		)

	def _update_cart_item(self):
		quantity = self._parse_int(self._cart_quantity.get(), 0)
		if quantity <= 0:
			self._cart_validation_label.configure(text="Quantity must be a whole number greater than 0.")
			return
		self._send_cart_quantity({"quantity": quantity})

	def _change_cart_item(self, change: int):
		if self._loaded_cart is None:
			self._cart_validation_label.configure(text="Load the cart before changing quantities.")
			return
		self._send_cart_quantity({"change": change})

	def _send_cart_quantity(self, payload: dict[str, object]):
		item_id = self._require_cart_field(self._cart_item_id, "Cart item ID")
		if not item_id:
			return

		payload = {**payload, "cartItemId": item_id, "cart": self._loaded_cart}
		if self._loaded_cart is None:
			payload.pop("cart")

		def on_updated(_result):
			item = find_cart_item(self._loaded_cart, item_id)
			if item is None:
				return
			if "change" in payload:
				item["quantity"] = int(item.get("quantity") or 0) + int(payload["change"])
			else:
				item["quantity"] = payload["quantity"]
			self._cart_quantity.delete(0, "end")
			self._cart_quantity.insert(0, str(item["quantity"]))

		self._run_in_background(
			*self._cart_output(),
			self._service.update_cart_item_quantity,
			payload,
			"Update quantity",
			on_success=on_updated,
		)

	@staticmethod
	def _parse_int(value: str, default: int) -> int:
		try:
			return int(value)
		except ValueError:
			return default


def run_app() -> None:
	configure_logging()
	ctk.set_appearance_mode("System")
	ctk.set_default_color_theme("blue")

	try:
		settings = AppSettings.from_env()
		configure_logging(settings.log_level)
		service = build_service(settings)
	except ConfigurationError as exc:
		logger.error("Configuration error: %s", exc)
		app = ctk.CTk()
		app.title("Shop API Tester - Configuration Error")
		app.geometry("760x360")
		message = ctk.CTkTextbox(app)
		message.pack(fill="both", expand=True, padx=16, pady=16)
		message.insert(
			"1.0",
			"Configuration error. Fix the environment variables and restart:\n\n"
			f"{exc}\n\n"
			"Supported:\n"
			"- SHOP_API_BASE_URL (default http://localhost:3000/v1)\n"
			"- SHOP_API_TIMEOUT_SECONDS\n"
			"- SHOP_API_CREDENTIAL_STORE (file or memory)\n"
			"- SHOP_API_CREDENTIAL_STORE_PATH\n"
			"- SHOP_API_LOG_LEVEL\n",
		)
		app.mainloop()
		return

	logger.info("Using API base URL %s", settings.base_url)
	window = MainWindow(service)
	window.mainloop()
