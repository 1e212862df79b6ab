from .auth_api import AuthApi
from .users_api import UsersApi
from .categories_api import CategoriesApi
from .shops_api import ShopsApi
from .products_api import ProductsApi
from .cart_api import CartApi

__all__ = ["AuthApi", "UsersApi", "CategoriesApi", "ShopsApi", "ProductsApi", "CartApi"]
