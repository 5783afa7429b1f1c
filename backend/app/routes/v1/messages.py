# backend/app/routes/v1/messages.py
"""
Messaging routes.

Endpoints under /api/messages. All business logic and participation checks
live in ConversationService; routes only translate HTTP to service calls.

Endpoints:
    POST /conversation                  -> Get or create a coach-student conversation
    POST /message                       -> Send a message
    GET /messages/{conversation_id}     -> Full transcript (ascending)
    GET /conversations                  -> Inbox with previews and unread counts
    POST /mark-read/{conversation_id}   -> Mark the counterpart's messages read
    GET /unread-count                   -> Unread messages across all conversations
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_conversation_service
from ...core.exceptions import DomainException
from ...principal import AuthenticatedUser
from ...schemas.conversation import (
    ConversationCreateRequest,
    ConversationListResponse,
    ConversationResponse,
    ConversationSummaryResponse,
    MarkReadResponse,
    MessageResponse,
    SendMessageRequest,
    UnreadCountResponse,
)
from ...services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/conversation", response_model=ConversationResponse)
async def get_or_create_conversation(
    payload: ConversationCreateRequest,
    response: Response,
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    """
    Return the conversation of the pair, creating it on first contact.

    Responds 201 when the conversation was created, 200 when it existed.
    """
    try:
        conversation, created = await asyncio.to_thread(
            service.get_or_create_conversation,
            principal,
            payload.coach_id,
            payload.student_id,
        )
    except DomainException as e:
        handle_domain_exception(e)

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ConversationResponse.model_validate(conversation)


@router.post("/message", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: SendMessageRequest,
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(
            service.send_message, principal, payload.conversation_id, payload.content
        )
    except DomainException as e:
        handle_domain_exception(e)
    return MessageResponse.model_validate(message)


@router.get("/messages/{conversation_id}", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: str,
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> List[MessageResponse]:
    try:
        messages = await asyncio.to_thread(service.list_messages, principal, conversation_id)
    except DomainException as e:
        handle_domain_exception(e)
    return [MessageResponse.model_validate(m) for m in messages]


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationListResponse:
    try:
        summaries = await asyncio.to_thread(service.list_conversations, principal)
    except DomainException as e:
        handle_domain_exception(e)
    return ConversationListResponse(
        conversations=[ConversationSummaryResponse.model_validate(s) for s in summaries]
    )


@router.post("/mark-read/{conversation_id}", response_model=MarkReadResponse)
async def mark_conversation_read(
    conversation_id: str,
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> MarkReadResponse:
    try:
        updated = await asyncio.to_thread(service.mark_read, principal, conversation_id)
    except DomainException as e:
        handle_domain_exception(e)
    return MarkReadResponse(updated=updated)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    principal: AuthenticatedUser = Depends(get_current_principal),
    service: ConversationService = Depends(get_conversation_service),
) -> UnreadCountResponse:
    try:
        count = await asyncio.to_thread(service.get_unread_count, principal)
    except DomainException as e:
        handle_domain_exception(e)
    return UnreadCountResponse(count=count)
