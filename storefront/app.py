from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query

from .catalog import CatalogError, CatalogLoader, Category
from .config import Settings, load_settings
from .controller import StorefrontController, build_whatsapp_order_url, selection_labels
from .conversation import ConversationSession, SessionBusyError, TextGenerator
from .filters import SIZES, FilterSelection, available_colors, filter_products
from .gemini_client import GeminiClient
from .kv_store import JsonFileKeyValueStore, KeyValueStore
from .models import (
    CatalogResponse,
    ChatRequest,
    ChatResponse,
    FilterToggleRequest,
    NavigateRequest,
    OrderLinkResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductOut,
    SegmentOut,
    StateResponse,
    TurnOut,
    ViewByNameRequest,
    WishlistResponse,
)
from .wishlist import WishlistStore

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

logger = logging.getLogger("lumina.api")


def configure_logging(level_name: str) -> None:
    # Configure the root logger once; the lumina.* hierarchy follows LOG_LEVEL.
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("lumina").setLevel(log_level)


def create_app(
    settings: Optional[Settings] = None,
    generator: Optional[TextGenerator] = None,
    storage: Optional[KeyValueStore] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Purpose: Build the storefront API around one controller and chat session.
    Inputs/Outputs: Optional settings, text generator, storage, and random source
        (defaults come from the environment); returns a FastAPI app.
    Side Effects / State: Loads .env, configures logging, reads the catalog and the
        persisted wishlist.
    Dependencies: CatalogLoader, StorefrontController, ConversationSession,
        GeminiClient, JsonFileKeyValueStore.
    Failure Modes: Invalid catalog raises CatalogError; a missing GEMINI_API_KEY
        raises ValueError when no generator is supplied.
    If Removed: The presentational layer has nothing to call.
    Testing Notes: Pass a fake generator and InMemoryKeyValueStore to TestClient.
    """
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH, override=False)
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    catalog, _ = CatalogLoader(settings.catalog_path).load()
    storage = storage if storage is not None else JsonFileKeyValueStore(settings.storage_path)
    controller = StorefrontController(
        catalog,
        WishlistStore(storage),
        rng=rng,
        deterministic_recommendations=settings.recommendation_mode == "deterministic",
    )
    session = ConversationSession(
        generator=generator or GeminiClient(settings),
        catalog=catalog,
        favorites=controller.wishlisted_products,
        prompts_dir=settings.prompts_dir,
        brand_name=settings.brand_name,
        model=settings.gemini_model,
    )

    app = FastAPI(title=f"{settings.brand_name.title()} Storefront")
    app.state.settings = settings
    app.state.controller = controller
    app.state.session = session

    def get_product_or_404(product_id: str):
        product = catalog.get(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Unknown product: {product_id}")
        return product

    def state_response() -> StateResponse:
        state = controller.state
        selected = controller.selected_product()
        return StateResponse(
            page=state.page,
            selected_categories=list(selection_labels(state.selection.categories)),
            selected_sizes=list(selection_labels(state.selection.sizes)),
            selected_colors=list(selection_labels(state.selection.colors)),
            filters_active=state.selection.is_active,
            wishlist_ids=list(state.wishlist),
            wishlist_count=len(state.wishlist),
            selected_product=ProductOut.from_product(selected) if selected else None,
        )

    @app.get("/api/catalog", response_model=CatalogResponse)
    def get_catalog() -> CatalogResponse:
        return CatalogResponse(
            brand=settings.brand_name,
            products=[ProductOut.from_product(product) for product in catalog],
            categories=[category.value for category in Category],
            sizes=list(SIZES),
            colors=available_colors(catalog),
        )

    @app.get("/api/products", response_model=ProductListResponse)
    def list_products(
        category: List[str] = Query(default=[]),
        size: List[str] = Query(default=[]),
        color: List[str] = Query(default=[]),
    ) -> ProductListResponse:
        """Filter the catalog by repeated category/size/color query parameters."""
        try:
            categories = frozenset(Category.from_label(label) for label in category)
        except CatalogError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        selection = FilterSelection(categories=categories, sizes=frozenset(size), colors=frozenset(color))
        products = filter_products(catalog, selection)
        return ProductListResponse(
            count=len(products),
            products=[ProductOut.from_product(product) for product in products],
        )

    @app.get("/api/products/{product_id}", response_model=ProductDetailResponse)
    def get_product(product_id: str) -> ProductDetailResponse:
        product = get_product_or_404(product_id)
        return ProductDetailResponse(
            product=ProductOut.from_product(product),
            recommendations=[ProductOut.from_product(item) for item in controller.recommendations_for(product)],
        )

    @app.get("/api/products/{product_id}/order-link", response_model=OrderLinkResponse)
    def get_order_link(product_id: str, size: Optional[str] = None, color: Optional[str] = None) -> OrderLinkResponse:
        product = get_product_or_404(product_id)
        return OrderLinkResponse(
            whatsapp_url=build_whatsapp_order_url(product, settings.whatsapp_number, size=size, color=color),
            form_url=settings.google_form_url,
        )

    @app.get("/api/state", response_model=StateResponse)
    def get_state() -> StateResponse:
        return state_response()

    @app.post("/api/navigate", response_model=StateResponse)
    def navigate(request: NavigateRequest) -> StateResponse:
        controller.navigate(request.page)
        return state_response()

    @app.post("/api/filters/toggle", response_model=StateResponse)
    def toggle_filter(request: FilterToggleRequest) -> StateResponse:
        try:
            controller.toggle_filter(request.facet, request.value)
        except CatalogError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return state_response()

    @app.post("/api/filters/clear", response_model=StateResponse)
    def clear_filters() -> StateResponse:
        controller.clear_filters()
        return state_response()

    @app.post("/api/products/view-by-name", response_model=StateResponse)
    def view_product_named(request: ViewByNameRequest) -> StateResponse:
        controller.view_product_named(request.name)
        return state_response()

    @app.post("/api/products/{product_id}/view", response_model=StateResponse)
    def view_product(product_id: str) -> StateResponse:
        controller.view_product(product_id)
        return state_response()

    @app.post("/api/product/close", response_model=StateResponse)
    def close_product() -> StateResponse:
        controller.close_product()
        return state_response()

    @app.get("/api/wishlist", response_model=WishlistResponse)
    def get_wishlist() -> WishlistResponse:
        return WishlistResponse(
            ids=list(controller.state.wishlist),
            products=[ProductOut.from_product(product) for product in controller.wishlisted_products()],
        )

    @app.post("/api/wishlist/{product_id}/toggle", response_model=WishlistResponse)
    def toggle_wishlist(product_id: str) -> WishlistResponse:
        controller.toggle_wishlist(product_id)
        return get_wishlist()

    @app.get("/api/chat", response_model=List[TurnOut])
    def get_chat() -> List[TurnOut]:
        return [
            TurnOut(
                role=turn.role,
                text=turn.text,
                timestamp=turn.timestamp,
                segments=[SegmentOut.from_segment(item) for item in session.segments_for(turn)],
            )
            for turn in session.turns
        ]

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest) -> ChatResponse:
        """Send a message to the stylist; 409 while a previous reply is pending."""
        try:
            answer = await session.send(request.message)
        except SessionBusyError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        segments = session.segments_for(session.turns[-1])
        return ChatResponse(answer_text=answer, segments=[SegmentOut.from_segment(item) for item in segments])

    logger.info(
        "startup brand=%s products=%d wishlist=%d recommendations=%s",
        settings.brand_name,
        len(catalog),
        len(controller.state.wishlist),
        settings.recommendation_mode,
    )
    return app
