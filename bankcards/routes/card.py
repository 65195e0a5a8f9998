"""API routes for Card manipulation"""

from fastapi import APIRouter, Depends, Query

from bankcards.middlewares.token import (
    get_identity_from_token,
    require_admin,
    require_user,
)
from bankcards.schemas.base import PaginationSchema
from bankcards.schemas.card import (
    CardCreateSchema,
    CardFiltersSchema,
    CardSchema,
    CardUpdateSchema,
)
from bankcards.schemas.transfer import TransferCreateSchema, TransferSchema
from bankcards.schemas.user import IdentitySchema
from bankcards.services.card import CardService

card_router = APIRouter(prefix="/cards", tags=["Cards"])


@card_router.post("", response_model=CardSchema)
def create_card(
    card: CardCreateSchema,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return card_service.create_card(card)


@card_router.get("", response_model=PaginationSchema[CardSchema])
def read_cards(
    filters: CardFiltersSchema = Depends(),
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(get_identity_from_token),
):
    return card_service.list_cards(filters, actor, skip, limit)


@card_router.post("/transfer", response_model=TransferSchema)
def transfer(
    transfer_request: TransferCreateSchema,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_user),
):
    return card_service.transfer(
        transfer_request.from_card_id,
        transfer_request.to_card_id,
        transfer_request.amount,
        actor,
    )


@card_router.get("/{card_id}", response_model=CardSchema)
def read_card(
    card_id: int,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(get_identity_from_token),
):
    return card_service.get_card(card_id, actor)


@card_router.patch("/{card_id}", response_model=CardSchema)
def update_card(
    card_id: int,
    card_update: CardUpdateSchema,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return card_service.update_card(card_id, card_update)


@card_router.delete("/{card_id}")
def delete_card(
    card_id: int,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
) -> int:
    return card_service.delete_card(card_id)


@card_router.post("/{card_id}/block", response_model=CardSchema)
def request_block(
    card_id: int,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_user),
):
    return card_service.request_block(card_id, actor)


@card_router.post("/{card_id}/block-admin", response_model=CardSchema)
def block_card(
    card_id: int,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return card_service.admin_block(card_id)


@card_router.post("/{card_id}/activate", response_model=CardSchema)
def activate_card(
    card_id: int,
    card_service: CardService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return card_service.admin_activate(card_id)
