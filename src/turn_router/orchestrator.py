"""Turn orchestrator for turn_router.

This module provides the main entry point of the package: it runs one
user turn through intent classification, context assembly, provider
dispatch, memory extraction and title derivation.
"""

import asyncio
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from turn_router.capabilities import CapabilityRegistry
from turn_router.config import TurnRouterConfig
from turn_router.credentials import RequestCredentialProvider
from turn_router.errors import (
    BadRequestError,
    ChatNotFoundError,
    EmptyCompletionError,
    InternalError,
    MissingCredentialError,
    NoImageReturnedError,
    ProviderError,
    ProviderErrorKind,
    TurnRouterError,
)
from turn_router.infra.llm.registry import AdapterRegistry
from turn_router.interfaces.classifier import IntentClassifierInterface
from turn_router.interfaces.credentials import CredentialProviderInterface
from turn_router.interfaces.files import FileStoreInterface
from turn_router.interfaces.storage import StorageInterface
from turn_router.logging import get_logger, turn_log_context
from turn_router.models.capability import ModelCapability, RequestKind
from turn_router.models.chat import Attachment, ChatDTO, MessageDTO, Role
from turn_router.models.context import AssembledContext, ContextEntry
from turn_router.models.memory import MemoryDTO
from turn_router.models.turn import (
    AssistantReply,
    ErrorResponse,
    IntentResult,
    Principal,
    TurnRequest,
    TurnResponse,
)
from turn_router.services.chat_titles import derive_title, needs_title
from turn_router.services.context_assembler import ContextAssembler
from turn_router.services.intent_classifier import KeywordIntentClassifier
from turn_router.services.memory_service import MemoryService

__all__ = ["TurnOrchestrator", "TurnOutcome", "TurnState"]

logger = get_logger(__name__)

NO_IMAGE_FALLBACK = (
    "I was able to generate an image request, but couldn't retrieve the image URL. "
    "Please check your OpenAI API key permissions for DALL-E."
)
EMPTY_COMPLETION_FALLBACK = "No response generated"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class TurnState(StrEnum):
    """Lifecycle states of a turn."""

    RECEIVED = "received"
    FILES_RESOLVED = "files_resolved"
    HISTORY_ASSEMBLED = "history_assembled"
    CLASSIFIED = "classified"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TurnOutcome:
    """Result and trace of one turn."""

    response: TurnResponse | None = None
    state: TurnState = TurnState.RECEIVED
    transitions: list[TurnState] = field(default_factory=lambda: [TurnState.RECEIVED])
    user_message: MessageDTO | None = None
    assistant_message: MessageDTO | None = None
    provider_error: ProviderError | None = None
    memories: list[MemoryDTO] = field(default_factory=list)
    title: str | None = None

    def advance(self, state: TurnState) -> None:
        self.state = state
        self.transitions.append(state)


@dataclass
class _Dispatch:
    """Resolved target of a turn."""

    capability: ModelCapability
    context: AssembledContext
    credential: str
    intent: IntentResult


class TurnOrchestrator:
    """Runs user turns against the configured providers.

    Example:
        async with await TurnOrchestrator.from_config() as orchestrator:
            status, body = await orchestrator.handle(principal, payload)
    """

    def __init__(
        self,
        storage: StorageInterface,
        file_store: FileStoreInterface,
        *,
        config: TurnRouterConfig | None = None,
        capabilities: CapabilityRegistry | None = None,
        adapters: AdapterRegistry | None = None,
        classifier: IntentClassifierInterface | None = None,
        assembler: ContextAssembler | None = None,
        memory_service: MemoryService | None = None,
    ) -> None:
        """Initialize orchestrator with collaborators.

        Args:
            storage: Datastore for chats, messages and memories
            file_store: File collaborator for attachments
            config: Configuration (default: loaded from environment)
            capabilities: Model capability registry (default: built-in table)
            adapters: Provider adapter registry (default: OpenAI + Anthropic)
            classifier: Intent classifier (default: keyword strategy)
            assembler: Context assembler
            memory_service: Memory service (default: over ``storage``)
        """
        self._config = config or TurnRouterConfig()
        self._storage = storage
        self._file_store = file_store
        self._capabilities = capabilities or CapabilityRegistry.default()
        self._adapters = adapters or AdapterRegistry.default(self._config.provider)
        self._classifier = classifier or KeywordIntentClassifier()
        self._assembler = assembler or ContextAssembler()
        self._memory = memory_service or MemoryService(
            storage, context_limit=self._config.memory_context_limit
        )
        self._owned_resources: list[Any] = []

    @classmethod
    async def from_config(cls, config: TurnRouterConfig | None = None) -> "TurnOrchestrator":
        """Create an orchestrator backed by MongoDB.

        Args:
            config: Configuration (default: loaded from environment)

        Returns:
            Connected TurnOrchestrator
        """
        from turn_router.infra.mongo import MongoFileRepository, MongoStorageRepository

        config = config or TurnRouterConfig()
        storage = await MongoStorageRepository.from_config(config.mongo)

        # Attachment metadata lives in the same database
        instance = cls(storage, MongoFileRepository(storage.client), config=config)
        instance._owned_resources.append(storage)
        return instance

    async def close(self) -> None:
        """Close owned connections."""
        for resource in self._owned_resources:
            await resource.close()
        self._owned_resources.clear()

    async def __aenter__(self) -> "TurnOrchestrator":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # === INBOUND OPERATION ===

    async def handle(self, principal: Principal, payload: dict[str, Any]) -> tuple[int, dict]:
        """Run a turn from a raw request payload.

        Args:
            principal: Authenticated caller
            payload: Request body (chatId, message, modelId, attachmentIds, providerKeys)

        Returns:
            (status code, response body) with {content, modelId} or {error}
        """
        try:
            request = TurnRequest.model_validate(payload)
        except ValidationError as e:
            logger.info("turn_request_invalid", errors=e.error_count())
            return 400, ErrorResponse(error="Invalid request").model_dump()

        credentials = RequestCredentialProvider(request.provider_keys, self._config.provider)
        try:
            outcome = await self.run_turn(principal, request, credentials)
        except TurnRouterError as e:
            logger.info("turn_rejected", status=e.status_code, reason=e.message)
            return self._error_body(e)
        except Exception:
            logger.exception("turn_failed_unexpectedly", chat_id=request.chat_id)
            return self._error_body(InternalError(INTERNAL_ERROR_MESSAGE))

        if outcome.response is None:
            logger.error(
                "turn_finished_without_response",
                chat_id=request.chat_id,
                state=outcome.state.value,
            )
            return self._error_body(InternalError(INTERNAL_ERROR_MESSAGE))
        return 200, outcome.response.model_dump(by_alias=True)

    @staticmethod
    def _error_body(error: TurnRouterError) -> tuple[int, dict]:
        return error.status_code, ErrorResponse(error=error.message).model_dump()

    # === MAIN WORKFLOW ===

    async def run_turn(
        self,
        principal: Principal,
        request: TurnRequest,
        credentials: CredentialProviderInterface | None = None,
    ) -> TurnOutcome:
        """Run one user turn.

        Validation failures (missing chat, unknown model, missing key) raise
        before anything is written. Provider failures are downgraded to a
        stored assistant message and the turn still completes.

        Args:
            principal: Authenticated caller
            request: Validated turn request
            credentials: Per-request credential provider (default: request keys
                with server defaults)

        Returns:
            TurnOutcome with the response and the stored messages

        Raises:
            TurnRouterError: For 400/404 conditions
        """
        credentials = credentials or RequestCredentialProvider(
            request.provider_keys, self._config.provider
        )
        outcome = TurnOutcome()

        with turn_log_context(
            chat_id=request.chat_id,
            owner_id=principal.user_id,
            model_id=request.model_id,
        ):
            try:
                await self._run(principal, request, credentials, outcome)
            except BaseException:
                outcome.advance(TurnState.FAILED)
                raise
        return outcome

    async def _run(
        self,
        principal: Principal,
        request: TurnRequest,
        credentials: CredentialProviderInterface,
        outcome: TurnOutcome,
    ) -> None:
        owner_id = principal.user_id
        if not request.message.strip() and not request.attachment_ids:
            raise BadRequestError("Message is required")

        chat = await self._storage.get_chat(request.chat_id, owner_id)
        if chat is None:
            raise ChatNotFoundError(request.chat_id)
        requested = self._capabilities.lookup(request.model_id)

        attachments = await self._resolve_attachments(
            request.attachment_ids, owner_id, load_images=requested.supports_vision
        )
        outcome.advance(TurnState.FILES_RESOLVED)

        history = await self._storage.get_messages_for_chat(chat.id)
        memories = await self._memory.top_memories(owner_id)
        context = self._assembler.assemble(
            history, memories, request.message, attachments, requested
        )
        outcome.advance(TurnState.HISTORY_ASSEMBLED)

        dispatch = self._resolve_dispatch(request, requested, context, attachments, credentials)
        outcome.advance(TurnState.CLASSIFIED)

        # Validation is over; from here on the user's turn is recorded
        outcome.user_message = MessageDTO(
            message_id=uuid.uuid4().hex,
            chat_id=chat.id,
            role=Role.USER,
            content=request.message,
            attachment_ids=list(request.attachment_ids),
            created_at=datetime.now(UTC),
        )
        await self._storage.save_message(outcome.user_message)

        reply = await self._dispatch(dispatch, outcome)
        outcome.advance(TurnState.DISPATCHED)

        outcome.assistant_message = MessageDTO(
            message_id=uuid.uuid4().hex,
            chat_id=chat.id,
            role=Role.ASSISTANT,
            content=reply.content,
            model_id=reply.model_id,
            created_at=datetime.now(UTC),
        )
        await self._storage.save_message(outcome.assistant_message)

        outcome.memories = await self._remember(owner_id, request.message)
        outcome.title = await self._update_title(chat, owner_id, request.message, history)

        outcome.response = TurnResponse(content=reply.content, model_id=reply.model_id)
        outcome.advance(TurnState.COMPLETED)
        logger.info(
            "turn_completed",
            target_model=reply.model_id,
            image_request=dispatch.intent.is_image_request,
            degraded=outcome.provider_error is not None,
            history_length=len(history),
        )

    async def _resolve_attachments(
        self,
        attachment_ids: Sequence[str],
        owner_id: str,
        load_images: bool,
    ) -> list[Attachment]:
        """Fetch attachment metadata; load image bytes only for vision models."""
        attachments: list[Attachment] = []
        for file_id in attachment_ids:
            attachment = await self._file_store.get_attachment(file_id, owner_id)
            if attachment is None:
                logger.warning("attachment_not_found", file_id=file_id)
                continue
            if attachment.is_image and load_images:
                data = await self._file_store.read_bytes(attachment)
                attachment = attachment.model_copy(update={"data": data})
            attachments.append(attachment)
        return attachments

    def _resolve_dispatch(
        self,
        request: TurnRequest,
        requested: ModelCapability,
        context: AssembledContext,
        attachments: Sequence[Attachment],
        credentials: CredentialProviderInterface,
    ) -> _Dispatch:
        """Pick the target model and check its credential."""
        intent = self._classifier.classify(request.message)

        if intent.is_image_request:
            target = self._capabilities.lookup(self._config.provider.image_model)
            prompt = intent.image_prompt
        elif requested.request_kind == RequestKind.IMAGE_GENERATION:
            target = requested
            prompt = self._assembler.compose_message_text(request.message, attachments)
        else:
            target = requested
            prompt = None

        if prompt is not None:
            context = AssembledContext(entries=(ContextEntry.text(Role.USER, prompt),))

        credential = credentials.get(target.provider)
        if not credential:
            if target.request_kind == RequestKind.IMAGE_GENERATION:
                raise MissingCredentialError(
                    target.provider.display_name,
                    "OpenAI API key not configured for image generation",
                )
            raise MissingCredentialError(target.provider.display_name)

        return _Dispatch(capability=target, context=context, credential=credential, intent=intent)

    async def _dispatch(self, dispatch: _Dispatch, outcome: TurnOutcome) -> AssistantReply:
        """Invoke the adapter, downgrading provider failures to fallback text."""
        target = dispatch.capability
        adapter = self._adapters.get(target)
        timeout = self._config.provider.request_timeout_seconds

        try:
            async with asyncio.timeout(timeout):
                return await adapter.invoke(dispatch.context, target, dispatch.credential)
        except TimeoutError:
            error = ProviderError(
                ProviderErrorKind.TIMEOUT,
                f"{target.provider.display_name} request timed out after {timeout:g}s",
            )
        except ProviderError as e:
            error = e
        except TurnRouterError:
            raise
        except asyncio.CancelledError:
            # Caller went away: no assistant message for this turn
            logger.info("turn_cancelled_during_dispatch", target_model=target.model_id)
            raise
        except Exception as e:
            error = ProviderError(
                ProviderErrorKind.MALFORMED,
                f"{target.provider.display_name} returned an unusable reply: {e}",
            )

        outcome.provider_error = error
        logger.warning(
            "provider_call_failed",
            target_model=target.model_id,
            kind=error.kind.value,
            error=error.message,
        )
        return AssistantReply(content=self._fallback_text(target, error), model_id=target.model_id)

    @staticmethod
    def _fallback_text(target: ModelCapability, error: ProviderError) -> str:
        """User-visible message for a failed provider call."""
        if isinstance(error, NoImageReturnedError):
            return NO_IMAGE_FALLBACK
        if isinstance(error, EmptyCompletionError):
            return EMPTY_COMPLETION_FALLBACK
        if target.request_kind == RequestKind.IMAGE_GENERATION:
            return (
                "I apologize, but I encountered an error while trying to generate the image. "
                f"Error: {error.message}"
            )
        return (
            "I apologize, but I encountered an error while getting a response from "
            f"{target.provider.display_name}. Error: {error.message}"
        )

    async def _remember(self, owner_id: str, message: str) -> list[MemoryDTO]:
        """Extract and store memories; failures never fail the turn."""
        try:
            return await self._memory.remember(owner_id, message)
        except Exception as e:
            logger.warning("memory_extraction_failed", error=str(e))
            return []

    async def _update_title(
        self,
        chat: ChatDTO,
        owner_id: str,
        message: str,
        history: Sequence[MessageDTO],
    ) -> str | None:
        if not needs_title(chat, len(history), self._config.default_chat_title):
            return None
        title = derive_title(
            message,
            max_words=self._config.title_max_words,
            max_length=self._config.title_max_length,
            fallback=self._config.default_chat_title,
        )
        await self._storage.update_chat_title(chat.id, owner_id, title)
        return title
