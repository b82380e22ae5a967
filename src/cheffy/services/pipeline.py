"""Recipe-step extraction pipeline for a single video request."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console

from cheffy.config.settings import Settings, get_settings
from cheffy.models.recipe import ExtractionResult, RecipeStep, StepSource
from cheffy.models.transcript import TranscriptSegment
from cheffy.services import DurationSource, SupportsClose
from cheffy.services.chapters import parse_chapters
from cheffy.services.description import DescriptionAcquirer
from cheffy.services.extraction import classify_step, extract_aggressive, extract_filtered, extract_lenient
from cheffy.services.guard import filter_by_duration, finalize_steps
from cheffy.services.page import PageFetcher
from cheffy.services.synthesis import synthesize_steps
from cheffy.services.transcript import TranscriptAcquirer
from cheffy.utils.progress import PipelineStage, ProgressUpdate
from cheffy.utils.validation import extract_video_id

ProgressCallback = Callable[[ProgressUpdate], None]
Extractor = Callable[[Sequence[TranscriptSegment], Optional[float]], List[RecipeStep]]


class RecipeStepService:
    """Turn a video URL into an ordered, deduplicated, duration-bounded list of recipe steps.

    The request moves through: resolve id, acquire description and transcript, chapters,
    transcript tiers A to C, synthesis, finalize. Only an unusable URL is fatal; every other
    failure degrades into a smaller or empty result.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        transcript_acquirer: Optional[TranscriptAcquirer] = None,
        description_acquirer: Optional[DescriptionAcquirer] = None,
        duration_source: Optional[DurationSource] = None,
        page_fetcher: Optional[PageFetcher] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._owned_resources: List[SupportsClose] = []
        fetcher = page_fetcher
        if fetcher is None and (transcript_acquirer is None or description_acquirer is None):
            fetcher = PageFetcher(settings=self._settings, console=self._console)
            self._owned_resources.append(fetcher)
        self._transcript_acquirer = transcript_acquirer or TranscriptAcquirer(
            settings=self._settings, console=self._console, page_fetcher=fetcher
        )
        self._description_acquirer = description_acquirer or DescriptionAcquirer(
            settings=self._settings, console=self._console, page_fetcher=fetcher
        )
        self._duration_source = duration_source

    def close(self) -> None:
        """Release the HTTP client this service created for itself."""

        while self._owned_resources:
            self._owned_resources.pop().close()

    def extract(
        self,
        url: str,
        *,
        duration: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult:
        """Extract recipe steps for the video behind ``url``.

        Parameters
        ----------
        url:
            User-provided YouTube URL or bare video id.
        duration:
            Known video length in seconds. Non-positive values count as unknown.
        on_progress:
            Optional callback that receives stage-level progress updates.

        Returns
        -------
        ExtractionResult
            Steps plus ``needs_duration`` when nothing could be produced without a duration.

        Raises
        ------
        cheffy.utils.validation.InvalidYouTubeURLError
            If no video identifier can be recovered from ``url``.
        """

        video_id = extract_video_id(url)
        self._emit_progress(on_progress, PipelineStage.RESOLVING, 100, 5, f"Resolved video {video_id}", url)
        known_duration = self._resolve_duration(video_id, duration)

        self._emit_progress(on_progress, PipelineStage.ACQUIRING, 0, 10, "Fetching description and transcript", url)
        description = self._description_acquirer.acquire(video_id)
        segments = self._transcript_acquirer.acquire(video_id)
        self._emit_progress(
            on_progress,
            PipelineStage.ACQUIRING,
            100,
            50,
            f"Description: {len(description)} chars, transcript: {len(segments)} segments",
            url,
        )

        steps = filter_by_duration(parse_chapters(description), known_duration)
        source = StepSource.CHAPTERS if steps else StepSource.NONE
        self._console.log(f"Chapters: {len(steps)} steps, video duration: {known_duration or 'unknown'}")
        self._emit_progress(on_progress, PipelineStage.CHAPTERS, 100, 55, f"{len(steps)} chapter steps", url)

        if segments:
            transcript_steps, transcript_source = self._run_transcript_tiers(
                segments, known_duration, have_chapters=bool(steps), on_progress=on_progress, url=url
            )
            if transcript_steps:
                steps, source = transcript_steps, transcript_source
        else:
            self._console.log("[yellow]No transcript data available[/yellow]")

        if not steps and not segments:
            if known_duration is None:
                self._console.log("[yellow]No duration provided, returning empty steps[/yellow]")
                self._emit_progress(on_progress, PipelineStage.COMPLETE, 100, 100, "Duration required", url)
                return ExtractionResult(video_id=video_id, needs_duration=True)
            self._emit_progress(on_progress, PipelineStage.SYNTHESIZING, 0, 80, "Creating default steps", url)
            steps = synthesize_steps(known_duration)
            source = StepSource.SYNTHESIZED if steps else StepSource.NONE

        self._emit_progress(on_progress, PipelineStage.FINALIZING, 0, 90, "Deduplicating steps", url)
        final_steps = [
            step.model_copy(update={"category": step.category or classify_step(step.instruction)})
            for step in finalize_steps(steps, known_duration)
        ]
        self._console.log(f"[green]Final result:[/green] {len(final_steps)} steps ({source.value})")
        self._emit_progress(on_progress, PipelineStage.COMPLETE, 100, 100, f"{len(final_steps)} steps", url)

        return ExtractionResult(
            video_id=video_id,
            steps=final_steps,
            duration_seconds=known_duration or 0.0,
            source=source if final_steps else StepSource.NONE,
        )

    def _run_transcript_tiers(
        self,
        segments: Sequence[TranscriptSegment],
        duration: Optional[float],
        *,
        have_chapters: bool,
        on_progress: Optional[ProgressCallback],
        url: str,
    ) -> Tuple[List[RecipeStep], StepSource]:
        """Escalate through the extraction tiers until one yields steps.

        Tier A always runs and overrides chapters; the looser tiers only run when neither
        chapters nor a previous tier produced anything.
        """

        tiers: List[Tuple[PipelineStage, StepSource, Extractor, int]] = [
            (PipelineStage.TRANSCRIPT, StepSource.TRANSCRIPT, extract_filtered, 65),
            (PipelineStage.AGGRESSIVE, StepSource.AGGRESSIVE, extract_aggressive, 72),
            (PipelineStage.LENIENT, StepSource.LENIENT, extract_lenient, 78),
        ]
        for position, (stage, source, extractor, overall) in enumerate(tiers):
            if position > 0 and have_chapters:
                break
            steps = filter_by_duration(extractor(segments, duration), duration)
            self._console.log(f"{source.value.title()} extraction: {len(steps)} steps from {len(segments)} segments")
            self._emit_progress(on_progress, stage, 100, overall, f"{len(steps)} {source.value} steps", url)
            if steps:
                return steps, source
        return [], StepSource.NONE

    def _resolve_duration(self, video_id: str, duration: Optional[float]) -> Optional[float]:
        if duration is not None and duration > 0:
            return float(duration)
        if self._duration_source is None:
            return None
        looked_up = self._duration_source.get_duration(video_id)
        if looked_up is not None and looked_up > 0:
            self._console.log(f"Duration for {video_id}: {looked_up:.0f}s")
            return float(looked_up)
        return None

    def _emit_progress(
        self,
        callback: Optional[ProgressCallback],
        stage: PipelineStage,
        stage_progress: int,
        overall_progress: int,
        message: str,
        video_url: str,
    ) -> None:
        """Emit a progress update to the supplied callback if one exists."""

        if callback is None:
            return
        callback(
            ProgressUpdate(
                stage=stage,
                stage_progress=stage_progress,
                overall_progress=overall_progress,
                message=message,
                video_url=video_url,
            )
        )


__all__ = ["ProgressCallback", "RecipeStepService"]
