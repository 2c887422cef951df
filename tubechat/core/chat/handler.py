"""
Chat handler for conversations grounded in video transcripts.
"""

from typing import List, Optional

from tubechat.config import chat_config
from tubechat.core.chat.budget import total_tokens, trim_to_budget
from tubechat.core.chat.context import build_context
from tubechat.core.chat.session import SessionManager
from tubechat.core.completion import CompletionService
from tubechat.models.schemas import ChatMessage, ChatTurnResult, Role
from tubechat.utils.error_handling import SessionValidationError
from tubechat.utils.helpers import truncate_text
from tubechat.utils.logger import logging


class ChatHandler:
    """Handler for chat turns against a session's transcript."""

    def __init__(self, session_manager: SessionManager, completion_service: CompletionService):
        self.session_manager = session_manager
        self.completion_service = completion_service

    async def handle_turn(
        self,
        message: str,
        video_id: str,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        language: Optional[str] = None,
        fallback_languages: Optional[List[str]] = None,
        narrow_context: bool = False,
    ) -> ChatTurnResult:
        """
        Run one chat turn.

        The user message is appended once the session passes validation.
        The assistant reply is appended only after a successful completion,
        so a failed call leaves the user message without a reply.

        Args:
            message: User message (already validated)
            video_id: YouTube video ID
            session_id: Optional existing session ID
            model: Model name override
            temperature: Sampling temperature override
            max_tokens: Completion token limit override
            language: Preferred caption language for a new session
            fallback_languages: Caption languages to try after the preferred one
            narrow_context: Only send transcript segments relevant to the message

        Returns:
            ChatTurnResult with the assistant message and usage

        Raises:
            TranscriptError: transcript could not be fetched for a new session
            SessionValidationError: session failed the structural check
            CompletionError: the model call failed
            SessionNotFoundError: the session was deleted during the turn
        """
        self.session_manager.maybe_reap()

        session = await self.session_manager.get_or_create(
            session_id, video_id, language=language, fallback_languages=fallback_languages
        )

        try:
            async with self.session_manager.lock(session.id):
                # Another request may have written this session while we waited
                session = self.session_manager.get(session.id) or session

                validation = self.session_manager.validate(session)
                if not validation.is_valid:
                    logging.error(f"Invalid session {session.id}: {validation.errors}")
                    raise SessionValidationError(validation.errors)

                user_message = ChatMessage(
                    role=Role.USER,
                    content=message,
                    video_id=session.video_id,
                    video_title=session.video_title,
                )
                self.session_manager.append_turn(session, user_message)
                logging.info(f"Session {session.id} question: {truncate_text(message)}")

                context = build_context(session, include_system_prompt=True, query=message if narrow_context else None)
                context = trim_to_budget(context, chat_config.CONTEXT_TOKEN_BUDGET)
                logging.debug(f"Context for session {session.id}: {len(context)} messages, ~{total_tokens(context)} tokens")

                result = await self.completion_service.complete(
                    context, model=model, temperature=temperature, max_tokens=max_tokens
                )

                assistant_message = ChatMessage(
                    role=Role.ASSISTANT,
                    content=result.text,
                    video_id=session.video_id,
                    video_title=session.video_title,
                )
                self.session_manager.append_turn(session, assistant_message)
        finally:
            # A session deleted mid-turn leaves its lock behind
            if self.session_manager.get(session.id) is None:
                self.session_manager.release_lock(session.id)

        return ChatTurnResult(
            message=assistant_message,
            session_id=session.id,
            usage=result.usage,
            model=result.model_used,
        )
