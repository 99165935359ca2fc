"""
IstoEuQuero Backend: Wishlist Service
======================================

What:  Gateway operations for users, wishlists and items.
How:   Each method checks required-field presence, then performs the store
       call(s) for that operation and unwraps the result. The service is
       stateless apart from the store client it was built with.
Who:   Called by the route handlers; calls SupabaseRestClient.

Operation → store calls:
    create_user               POST  users_table
    create_wishlist           POST  wishlists_table
    add_item                  POST  items_table
    mark_purchased            PATCH items_table?id=eq.<item_id>
    get_wishlist_with_items   GET   wishlists_table?id=eq.<id>
                              GET   items_table?wishlist_id=eq.<id>&order=created_at.asc

Why:
    The store answers whatever its tables hold. A 2xx body that is not the
    expected object or array (a misconfigured table, a view returning
    scalars) is reported as an upstream error with
    "Resposta inesperada do banco de dados" rather than surfacing later as
    an AttributeError and a bare 500.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from istoeuquero.config import Settings
from istoeuquero.exceptions import NotFoundError, UpstreamError, ValidationError
from istoeuquero.schemas.wishlist import (
    PURCHASED_STATUS,
    ItemCreate,
    ItemPurchase,
    Record,
    UserCreate,
    WishlistCreate,
    WishlistDetail,
)
from istoeuquero.services.store_client import SupabaseRestClient, eq, first_record

logger = logging.getLogger(__name__)


@asynccontextmanager
async def fallback_message(message: str) -> AsyncIterator[None]:
    """
    Fills in `message` for upstream failures that carried no text of their own.

    A store error that reports a message keeps it; only empty ones (usually
    transport failures) get the per-operation fallback.
    """
    try:
        yield
    except UpstreamError as exc:
        if exc.message:
            raise
        raise UpstreamError(
            message=message,
            upstream_status=exc.upstream_status,
            context=exc.context,
        ) from exc


def require(message: str, **fields: Any) -> None:
    """Raises ValidationError if any of `fields` is missing (None or empty)."""
    missing = tuple(name for name, value in fields.items() if not value)
    if missing:
        raise ValidationError(message=message, fields=missing)


UNEXPECTED_RESPONSE = "Resposta inesperada do banco de dados"


def expect_record(data: Any, table: str) -> Record:
    """Raises UpstreamError unless `data` is a single JSON object."""
    if not isinstance(data, dict):
        raise UpstreamError(
            message=UNEXPECTED_RESPONSE,
            context={"table": table, "received": type(data).__name__},
        )
    return data


def expect_records(data: Any, table: str) -> List[Record]:
    """Raises UpstreamError unless `data` is a JSON array of objects. None reads as []."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise UpstreamError(
            message=UNEXPECTED_RESPONSE,
            context={"table": table, "received": type(data).__name__},
        )
    for row in data:
        expect_record(row, table)
    return data


class WishlistService:
    """
    Business layer of the gateway.

    Args:
        store:     Client for the external store
        settings:  Settings holding the table names
    """

    def __init__(self, store: SupabaseRestClient, settings: Settings):
        self.store = store
        self.users_table = settings.users_table
        self.wishlists_table = settings.wishlists_table
        self.items_table = settings.items_table

    async def _insert_one(self, table: str, row: Dict[str, Any]) -> Record:
        record = first_record(await self.store.insert(table, row))
        if record is None:
            raise UpstreamError(
                message="O banco de dados não retornou o registro criado",
                context={"table": table},
            )
        return expect_record(record, table)

    async def create_user(self, payload: UserCreate) -> Record:
        require("name é obrigatório", name=payload.name)

        async with fallback_message("Erro ao criar usuário"):
            record = await self._insert_one(
                self.users_table,
                {"name": payload.name, "email": payload.email},
            )
        logger.info("User created: %s", record.get("id"))
        return record

    async def create_wishlist(self, payload: WishlistCreate) -> Record:
        require(
            "user_id e title são obrigatórios",
            user_id=payload.user_id,
            title=payload.title,
        )

        async with fallback_message("Erro ao criar lista"):
            record = await self._insert_one(
                self.wishlists_table,
                {
                    "user_id": payload.user_id,
                    "title": payload.title,
                    "description": payload.description,
                    "event_date": payload.event_date,
                },
            )
        logger.info("Wishlist created: %s (user %s)", record.get("id"), payload.user_id)
        return record

    async def add_item(self, wishlist_id: str, payload: ItemCreate) -> Record:
        require("name é obrigatório", name=payload.name)

        async with fallback_message("Erro ao adicionar item"):
            record = await self._insert_one(
                self.items_table,
                {"wishlist_id": wishlist_id, "name": payload.name, "url": payload.url},
            )
        logger.info("Item %s added to wishlist %s", record.get("id"), wishlist_id)
        return record

    async def mark_purchased(self, item_id: str, payload: ItemPurchase) -> Record:
        """
        Sets the item's status to PURCHASED_STATUS and records the buyer.

        The same write is sent whatever the prior status, so repeating the
        call leaves the item in the same state.

        Raises:
            NotFoundError: no item matched `item_id`
        """
        async with fallback_message("Erro ao marcar item como comprado"):
            data = await self.store.update(
                self.items_table,
                {"id": eq(item_id)},
                {"status": PURCHASED_STATUS, "buyer_name": payload.buyer_name},
            )

        record = first_record(data)
        if record is None:
            raise NotFoundError(
                message="Item não encontrado", resource="item", resource_id=item_id
            )
        record = expect_record(record, self.items_table)
        logger.info("Item %s marked as purchased", item_id)
        return record

    async def get_wishlist_with_items(self, wishlist_id: str) -> WishlistDetail:
        """
        Reads a wishlist and its items, oldest item first.

        Raises:
            NotFoundError: no wishlist matched `wishlist_id`
        """
        async with fallback_message("Erro ao buscar lista"):
            wishlist = first_record(
                await self.store.select(self.wishlists_table, {"id": eq(wishlist_id)})
            )
            if not wishlist:
                raise NotFoundError(
                    message="Lista não encontrada",
                    resource="wishlist",
                    resource_id=wishlist_id,
                )
            wishlist = expect_record(wishlist, self.wishlists_table)

            items = expect_records(
                await self.store.select(
                    self.items_table,
                    {"wishlist_id": eq(wishlist_id)},
                    order="created_at.asc",
                ),
                self.items_table,
            )

        return WishlistDetail(wishlist=wishlist, items=items)
