"""Export orchestration: single-slide downloads and full-sequence archives."""

import asyncio
import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from listing_creatives.domain.exports import (
    ArchiveExport,
    ExportResult,
    RasterOptions,
    SlideOutcome,
)
from listing_creatives.domain.slides import Format, Subject
from listing_creatives.services.notifications import DownloadSink, Notifier
from listing_creatives.services.preview import PreviewSession
from listing_creatives.services.rasterizer import Rasterizer, RenderTargetUnavailable

logger = logging.getLogger(__name__)

PNG_MEDIA_TYPE = "image/png"
ZIP_MEDIA_TYPE = "application/zip"


class ExportBridge(Protocol):
    """Downstream consumer of a completed full export."""

    async def persist(  # noqa: PLR0913
        self,
        *,
        user_id: UUID,
        data: Subject,
        photos: list[str],
        fmt: Format,
        exports: list[ExportResult],
    ) -> UUID | None:
        """Store the exported bitmaps and derived records."""


def slide_file_name(subject: str, fmt: Format, slide_index: int) -> str:
    """File name of one exported slide; numbering is 1-based."""
    return f"{subject}-{fmt.value}-{slide_index + 1}.png"


def archive_file_name(subject: str, fmt: Format) -> str:
    """File name of the archive holding every exported slide."""
    return f"{subject}-{fmt.value}-completo.zip"


def build_archive(exports: list[ExportResult]) -> bytes:
    """Zip bitmaps in the given order under their suggested names."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for export in exports:
            archive.writestr(export.suggested_file_name, export.bitmap)
    return buffer.getvalue()


@dataclass
class ExportOrchestrator:
    """Drives the rasterizer over one or all slides of a preview session."""

    rasterizer: Rasterizer
    options: RasterOptions = field(default_factory=RasterOptions)
    bridge: ExportBridge | None = None
    _background: set[asyncio.Task] = field(default_factory=set, init=False, repr=False)

    async def export_single(
        self,
        session: PreviewSession,
        slide_index: int,
        downloads: DownloadSink,
        notifier: Notifier,
    ) -> ExportResult | None:
        """Rasterize one slide and deliver it as a PNG download."""
        try:
            bitmap = await self._rasterize(session, slide_index)
        except RenderTargetUnavailable as exc:
            logger.warning("Single export failed: %s", exc)
            notifier.notify("Erro ao exportar", str(exc), error=True)
            return None

        result = ExportResult(
            slide_index=slide_index,
            bitmap=bitmap,
            suggested_file_name=slide_file_name(
                session.subject, session.format, slide_index
            ),
        )
        downloads.deliver(result.suggested_file_name, result.bitmap, PNG_MEDIA_TYPE)
        notifier.notify("Imagem exportada", result.suggested_file_name)
        return result

    async def export_all(
        self,
        session: PreviewSession,
        downloads: DownloadSink,
        notifier: Notifier,
        user_id: UUID | None = None,
    ) -> ArchiveExport:
        """Rasterize every slide in order and deliver a ZIP of the successes.

        The slides and surfaces are captured on entry, so a format switch
        during the export does not change what ships. A slide that fails is
        left out of the archive; the rest still ship. Persistence runs
        afterwards as a detached task.
        """
        subject = session.subject
        fmt = session.format
        data = session.data
        photos = session.catalog.urls
        slide_count = len(session.slides)
        surfaces = {
            index: surface.snapshot() for index, surface in session.surfaces.items()
        }
        outcomes: list[SlideOutcome] = []
        for index in range(slide_count):
            file_name = slide_file_name(subject, fmt, index)
            try:
                bitmap = await self.rasterizer.rasterize(
                    surfaces.get(index), self.options, slide_index=index
                )
            except RenderTargetUnavailable as exc:
                logger.warning("Skipping slide %s in archive: %s", index + 1, exc)
                outcomes.append(SlideOutcome(index, file_name, error=exc))
                continue
            outcomes.append(SlideOutcome(index, file_name, bitmap=bitmap))

        result = ArchiveExport(
            file_name=archive_file_name(subject, fmt),
            archive=None,
            outcomes=tuple(outcomes),
        )
        successes = result.successes
        if not successes:
            notifier.notify(
                "Erro ao exportar", "Nenhuma imagem pôde ser gerada", error=True
            )
            return result

        result = ArchiveExport(
            file_name=result.file_name,
            archive=build_archive(successes),
            outcomes=result.outcomes,
        )
        downloads.deliver(result.file_name, result.archive, ZIP_MEDIA_TYPE)
        notifier.notify(
            "Exportação concluída",
            f"{len(successes)} de {len(outcomes)} imagens exportadas",
        )

        if self.bridge is not None and user_id is not None:
            self._schedule_persist(
                user_id=user_id,
                data=data,
                photos=photos,
                fmt=fmt,
                exports=successes,
            )
        return result

    async def drain(self) -> None:
        """Wait for detached persistence tasks to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of persistence tasks still running."""
        return len(self._background)

    async def _rasterize(self, session: PreviewSession, slide_index: int) -> bytes:
        if not 0 <= slide_index < len(session.slides):
            raise RenderTargetUnavailable(slide_index)
        return await self.rasterizer.rasterize(
            session.surface(slide_index), self.options, slide_index=slide_index
        )

    def _schedule_persist(self, **kwargs) -> None:
        task = asyncio.create_task(self.bridge.persist(**kwargs))
        self._background.add(task)
        task.add_done_callback(self._on_persist_done)

    def _on_persist_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.warning("Creative persistence was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Creative persistence failed", exc_info=(type(exc), exc, exc.__traceback__)
            )
