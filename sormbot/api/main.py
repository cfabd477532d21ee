"""
HTTP API exposing the same message handling as the Telegram bot.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request

from .schemas import ChatRequest, ChatResponse, HealthResponse, StatsResponse, TopQuestion
from ..core.config import VERSION, debug_enabled
from ..core.context import BotContext, build_context
from ..core.dispatcher import Dispatcher
from ..core.errors import PersistenceError


def get_context(request: Request) -> BotContext:
    return request.app.state.context


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def create_app(context: BotContext = None) -> FastAPI:
    """Build the FastAPI app.

    With no context, one is built from the environment on startup and closed on
    shutdown. A context passed in stays owned by the caller.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "context", None) is None:
            owned = build_context()
            app.state.context = owned
            app.state.dispatcher = Dispatcher(owned)
        try:
            yield
        finally:
            if owned is not None:
                owned.close()

    app = FastAPI(
        title="SormBot API",
        version=VERSION,
        description="Question/answer bot with teachable SQLite knowledge",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
        lifespan=lifespan
    )

    app.state.context = context
    app.state.dispatcher = Dispatcher(context) if context is not None else None

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint(ctx: BotContext = Depends(get_context)):
        """Check system health."""
        db_health = ctx.database.health_check()
        try:
            entry_count = ctx.store.count_entries() if db_health else 0
        except PersistenceError:
            entry_count = 0

        return HealthResponse(
            status="healthy" if db_health else "unhealthy",
            version=VERSION,
            db_health=db_health,
            entry_count=entry_count
        )

    @app.post("/chat", response_model=ChatResponse)
    def chat_endpoint(request: ChatRequest, dispatcher: Dispatcher = Depends(get_dispatcher)):
        """Handle one message exactly as the bot would."""
        reply = dispatcher.handle_message(request.user_id, request.username, request.message)
        if reply is None:
            return ChatResponse(reply=None)
        return ChatResponse(reply=reply.text, parse_mode=reply.parse_mode)

    @app.get("/stats", response_model=StatsResponse)
    def stats_endpoint(ctx: BotContext = Depends(get_context)):
        """Learned entry count, interaction count and the most-used questions."""
        try:
            stats = ctx.stats.report()
        except PersistenceError as e:
            raise HTTPException(status_code=503, detail=f"Could not retrieve statistics: {e}")

        return StatsResponse(
            entry_count=stats.entry_count,
            interaction_count=stats.interaction_count,
            top_questions=[
                TopQuestion(question=entry.question, usage_count=entry.usage_count)
                for entry in stats.top_questions
            ]
        )

    return app
