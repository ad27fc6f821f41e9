"""laman - cart and catalog state engine for the Laman delivery client."""

__version__ = "0.1.0"

from .cart import CartEngine, CartState
from .catalog import CatalogFilterEngine
from .client import CatalogService, LamanClient
from .config import Settings
from .errors import (
    ConflictError,
    DecodeError,
    LamanError,
    NetworkError,
    ServerError,
    ServiceError,
    ValidationError,
)
from .models import (
    CartItem,
    Category,
    CreateOrderItem,
    CreateOrderRequest,
    Order,
    OrderForm,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    Store,
    StoreCategoryType,
    Subcategory,
)
from .orders import OrderWorkflow
from .product_index import ProductIndex
from .session import LamanSession
from .stores import StoreCatalogEngine, StoreFilterEngine

__all__ = [
    "__version__",
    # Engines
    "CartEngine",
    "CartState",
    "CatalogFilterEngine",
    "StoreFilterEngine",
    "StoreCatalogEngine",
    "OrderWorkflow",
    "ProductIndex",
    "LamanSession",
    # Service
    "CatalogService",
    "LamanClient",
    "Settings",
    # Models
    "CartItem",
    "Category",
    "CreateOrderItem",
    "CreateOrderRequest",
    "Order",
    "OrderForm",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "Product",
    "Store",
    "StoreCategoryType",
    "Subcategory",
    # Errors
    "LamanError",
    "ValidationError",
    "ConflictError",
    "ServiceError",
    "NetworkError",
    "ServerError",
    "DecodeError",
]
