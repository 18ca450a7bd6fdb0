# --- Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import cart, catalog
from .config import Settings, configure_logging
from .database import build_session_factory, create_tables, get_db
from .errors import OrderServiceError
from .orders import OrderService
from .payments import StripeCheckoutGateway
from .schemas import (
    CartItemRequest,
    CartRequest,
    FoodCreate,
    FoodRemoveRequest,
    PlaceOrderRequest,
    UpdateStatusRequest,
    UserCreate,
    UserOrdersRequest,
    VerifyOrderRequest,
)

logger = logging.getLogger(__name__)


def get_order_service(request: Request, db: Session = Depends(get_db)):
    """Build the order service from the dependencies held by the app."""
    state = request.app.state
    return OrderService(db, state.gateway, state.settings)


def create_app(settings=None, gateway=None, session_factory=None):
    """
    Wire the service together. Anything not passed in is built from settings:
    the database from DATABASE_URL and the Stripe gateway from STRIPE_SECRET_KEY.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if session_factory is None:
        session_factory = build_session_factory(settings.database_url)
    if gateway is None:
        gateway = StripeCheckoutGateway(
            settings.stripe_secret_key,
            api_base=settings.stripe_api_base,
            timeout=settings.payment_timeout_seconds,
        )

    @asynccontextmanager
    async def lifespan(app):
        # Create database tables on startup if they don't exist.
        create_tables(session_factory)
        yield

    app = FastAPI(title="Food Ordering Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.session_factory = session_factory

    # --- Error Handlers ---
    @app.exception_handler(OrderServiceError)
    async def order_service_error(request: Request, exc: OrderServiceError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "message": "Server Error"})

    # --- Endpoints ---
    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"message": "Food ordering service is running"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Places an order: prices the cart, stores the order, clears the cart and opens a checkout session.
    @app.post("/api/order/place")
    def place_order(req: PlaceOrderRequest, service: OrderService = Depends(get_order_service)):
        items = [line.model_dump(by_alias=True) for line in req.items]
        session_url = service.place_order(req.userId, items, req.address)
        return {"success": True, "session_url": session_url}

    # Called by the checkout redirect target with the payment outcome.
    @app.post("/api/order/verify")
    def verify_order(req: VerifyOrderRequest, service: OrderService = Depends(get_order_service)):
        if service.verify_order(req.orderId, req.succeeded()):
            return {"success": True, "message": "Payment Successful"}
        return {"success": False, "message": "Payment Failed / Order Cancelled"}

    @app.post("/api/order/userorders")
    def user_orders(req: UserOrdersRequest, service: OrderService = Depends(get_order_service)):
        """Retrieves every order placed by one user."""
        return {"success": True, "data": [o.to_dict() for o in service.user_orders(req.userId)]}

    @app.get("/api/order/list")
    def list_orders(service: OrderService = Depends(get_order_service)):
        """Retrieves a list of all orders (admin)."""
        return {"success": True, "data": [o.to_dict() for o in service.list_orders()]}

    @app.post("/api/order/status")
    def update_status(req: UpdateStatusRequest, service: OrderService = Depends(get_order_service)):
        """Sets the free-text status of an order (admin)."""
        service.update_status(req.orderId, req.status)
        return {"success": True, "message": "Order status updated"}

    # --- Catalog ---
    @app.get("/api/food/list")
    def list_foods(db: Session = Depends(get_db)):
        return {"success": True, "data": [f.to_dict() for f in catalog.list_foods(db)]}

    @app.post("/api/food/add")
    def add_food(req: FoodCreate, db: Session = Depends(get_db)):
        food = catalog.add_food(db, req.name, req.description, req.price, req.category)
        return {"success": True, "message": "Food Added", "data": food.to_dict()}

    @app.post("/api/food/remove")
    def remove_food(req: FoodRemoveRequest, db: Session = Depends(get_db)):
        catalog.remove_food(db, req.id)
        return {"success": True, "message": "Food Removed"}

    # --- Users & Cart ---
    @app.post("/api/user/register")
    def register_user(req: UserCreate, db: Session = Depends(get_db)):
        user = cart.register_user(db, req.name, req.email)
        return {"success": True, "data": user.to_dict()}

    @app.post("/api/cart/add")
    def add_to_cart(req: CartItemRequest, db: Session = Depends(get_db)):
        cart.add_to_cart(db, req.userId, req.itemId)
        return {"success": True, "message": "Added To Cart"}

    @app.post("/api/cart/remove")
    def remove_from_cart(req: CartItemRequest, db: Session = Depends(get_db)):
        cart.remove_from_cart(db, req.userId, req.itemId)
        return {"success": True, "message": "Removed From Cart"}

    @app.post("/api/cart/get")
    def get_cart(req: CartRequest, db: Session = Depends(get_db)):
        return {"success": True, "cartData": cart.get_cart(db, req.userId)}

    return app
