"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import Response

from listing_creatives.api.models import (
    CategoryResponse,
    CreativeRequest,
    PreviewResponse,
    SlideSummary,
)
from listing_creatives.app_logging import configure_logging
from listing_creatives.containers import AppContainer
from listing_creatives.domain.listings import PropertyData
from listing_creatives.domain.photos import CATEGORY_LABELS
from listing_creatives.services.copy import caption_text
from listing_creatives.services.notifications import (
    BufferedDownloadSink,
    CollectingNotifier,
)
from listing_creatives.services.preview import PreviewSession


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/creatives/preview")
    async def preview(payload: CreativeRequest) -> PreviewResponse:
        """Build the slide sequence without rendering it."""
        session = _session(payload)
        return PreviewResponse(
            subject=session.subject,
            format=session.format,
            slides=[
                SlideSummary(
                    index=index,
                    name=slide.name,
                    template=slide.render.template,
                    variant=slide.render.variant,
                    source_category=slide.source_category,
                    photos=list(slide.render.photos),
                    labels=list(slide.render.labels),
                    caption=slide.render.caption,
                )
                for index, slide in enumerate(session.slides)
            ],
            caption=(
                caption_text(session.data)
                if isinstance(session.data, PropertyData)
                else None
            ),
        )

    @app.post("/creatives/export/{slide_index}")
    async def export_slide(
        slide_index: int, payload: CreativeRequest, request: Request
    ) -> Response:
        """Render one slide and return it as a PNG."""
        state_container: AppContainer = request.app.state.container
        session = _session(payload)
        await session.mount_slide(state_container.renderer, slide_index)
        downloads = BufferedDownloadSink()
        notifier = CollectingNotifier()
        result = await state_container.export_orchestrator.export_single(
            session, slide_index, downloads, notifier
        )
        delivered = downloads.last
        if result is None or delivered is None:
            error = notifier.last_error
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=error.message if error else "Export failed",
            )
        return _download(delivered.file_name, delivered.content, delivered.media_type)

    @app.post("/creatives/export")
    async def export_all(
        payload: CreativeRequest,
        request: Request,
        background_tasks: BackgroundTasks,
        x_user_id: UUID | None = Header(default=None),
    ) -> Response:
        """Render every slide and return a ZIP archive of the successes."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.export_orchestrator
        session = _session(payload)
        await session.mount(state_container.renderer)
        downloads = BufferedDownloadSink()
        notifier = CollectingNotifier()
        result = await orchestrator.export_all(
            session, downloads, notifier, user_id=x_user_id
        )
        background_tasks.add_task(orchestrator.drain)
        delivered = downloads.last
        if delivered is None:
            error = notifier.last_error
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=error.message if error else "Export failed",
            )
        if result.failures:
            logger.warning(
                "Archive %s is missing %s slide(s)",
                result.file_name,
                len(result.failures),
            )
        response = _download(
            delivered.file_name, delivered.content, delivered.media_type
        )
        response.headers["X-Failed-Slides"] = ",".join(
            str(outcome.slide_index + 1) for outcome in result.failures
        )
        return response

    @app.post("/photos/categorize")
    async def categorize_photo(request: Request) -> CategoryResponse:
        """Detect the category of a raw image body."""
        state_container: AppContainer = request.app.state.container
        categorizer = state_container.photo_categorizer
        if categorizer is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Photo categorization is not configured",
            )
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image body"
            )
        category = await categorizer.detect(image_bytes)
        return CategoryResponse(category=category, label=CATEGORY_LABELS[category])

    return app


def _session(payload: CreativeRequest) -> PreviewSession:
    if payload.management is not None:
        return PreviewSession.for_management(
            payload.management.to_domain(), fmt=payload.format
        )
    return PreviewSession.for_property(
        payload.property.to_domain(),
        [photo.to_domain() for photo in payload.photos],
        fmt=payload.format,
    )


def _download(file_name: str, content: bytes, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
