"""Translation orchestrator: read, parse, translate, post-process, rebuild."""

import asyncio
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable

from .config import Config
from .errors import (
    EmptyOrInvalidDocument,
    InvalidFileType,
    SubtitleTranslationError,
    TranslationFailed,
    UnknownFailure,
)
from .models import PipelineSnapshot, PipelineStatus, ServiceStatus, SubtitleBlock
from .postprocess import apply_header_footer, renumber
from .srt import parse_srt, read_srt_text, subtitles_to_srt
from .translate import LogCallback, ProgressCallback, TranslationService

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[PipelineSnapshot], None]

MSG_INVALID_FILE_TYPE = "Please select a file with the .srt extension."
MSG_NO_FILE = "No file selected."
MSG_EMPTY_DOCUMENT = "The subtitle file is empty or not in a valid format."
MSG_UNKNOWN = "An unknown error occurred."

_BLANK_LINES_RE = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")


def merge_progress(current: dict[int, str], batch: dict[int, str]) -> dict[int, str]:
    """Fold a partial batch into the live translation map.

    Returns a new dict; the last write per index wins and no index is removed,
    so batches can arrive in any order.
    """
    return {**current, **batch}


def clean_translation(text: str) -> str:
    """Collapse blank lines inside a translated cue so it cannot end the cue early."""
    return _BLANK_LINES_RE.sub("\n", text.replace("\r\n", "\n").replace("\r", "\n")).strip()


def merge_translations(
    subtitles: list[SubtitleBlock], translations: dict[int, str]
) -> list[SubtitleBlock]:
    """Substitute translated text per cue, keeping the original where none came back.

    Empty or whitespace-only translations count as missing.
    """
    merged = []
    for sub in subtitles:
        text = clean_translation(translations.get(sub.index) or "")
        merged.append(sub.model_copy(update={"text": text}) if text else sub)
    return merged


class TranslationOrchestrator:
    """Owns the state of one subtitle translation at a time.

    Callers send intents (``select_file``, ``translate``, ``reset``,
    ``set_online``) and read immutable snapshots, either by polling
    ``snapshot()`` or through ``subscribe``.

    Every run and every reset bumps a run token. Callbacks and results that
    belong to an older token are dropped, so a late reply from an abandoned
    run cannot leak into the next one.
    """

    def __init__(
        self,
        service: TranslationService,
        config: Config | None = None,
        online: bool = True,
        tick_interval: float = 1.0,
    ):
        self.service = service
        self.config = config or Config()
        self.tick_interval = tick_interval
        self._state = PipelineSnapshot(online=online)
        self._file_path: Path | None = None
        self._run_token = 0
        self._ticker: asyncio.Task | None = None
        self._listeners: list[SnapshotListener] = []

    def snapshot(self) -> PipelineSnapshot:
        return self._state

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)

    def _is_current(self, token: int) -> bool:
        return token == self._run_token

    def _add_log(self, message: str, level: int = logging.INFO) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        logger.log(level, message)
        self._update(logs=(*self._state.logs, f"[{timestamp}] {message}"))

    def _ready_or_offline(self) -> ServiceStatus:
        return ServiceStatus.READY if self._state.online else ServiceStatus.ERROR

    # Intents

    def select_file(self, path: str | Path) -> PipelineSnapshot:
        """Pick the subtitle file for the next run.

        A name without a case-insensitive ``.srt`` suffix resets everything and
        leaves the pipeline in ``error``.
        """
        path = Path(path)
        if not path.name.lower().endswith(".srt"):
            self.reset()
            self._update(
                status=PipelineStatus.ERROR,
                error_message=MSG_INVALID_FILE_TYPE,
                error_kind=InvalidFileType.__name__,
            )
            return self._state

        self._file_path = path
        self._update(
            file_name=path.name,
            status=PipelineStatus.IDLE,
            translated_content=None,
            error_message="",
            error_kind="",
        )
        return self._state

    def reset(self) -> PipelineSnapshot:
        """Drop the file and every derived value, back to ``idle``."""
        self._run_token += 1
        self._stop_ticker()
        self._file_path = None
        self._update(
            status=PipelineStatus.IDLE,
            file_name="",
            error_message="",
            error_kind="",
            logs=(),
            elapsed_seconds=0,
            original_subtitles=(),
            live_translations={},
            translated_content=None,
            service_status=(
                ServiceStatus.READY if self._state.online else self._state.service_status
            ),
        )
        return self._state

    def set_online(self, online: bool) -> PipelineSnapshot:
        """Record a connectivity change.

        Going offline marks the service as failed but leaves a running
        translation alone; it fails on its own if the network is really gone.
        """
        if online:
            service_status = self._state.service_status
            if service_status is not ServiceStatus.ACTIVE:
                service_status = ServiceStatus.READY
            self._update(online=True, service_status=service_status)
        else:
            self._update(online=False, service_status=ServiceStatus.ERROR)
        return self._state

    async def translate(self) -> PipelineSnapshot:
        """Run the selected file through the whole pipeline.

        Never raises for pipeline failures; they end in the ``error`` state.
        Returns the snapshot current when the run finishes (or is abandoned).
        """
        self._run_token += 1
        token = self._run_token
        path = self._file_path

        if path is None:
            self._update(
                status=PipelineStatus.ERROR,
                error_message=MSG_NO_FILE,
                error_kind=InvalidFileType.__name__,
            )
            return self._state

        self._stop_ticker()
        self._update(
            logs=(),
            elapsed_seconds=0,
            live_translations={},
            original_subtitles=(),
            translated_content=None,
            error_message="",
            error_kind="",
        )
        self._add_log("Process started.")
        self._update(service_status=ServiceStatus.ACTIVE, status=PipelineStatus.PARSING)

        try:
            result = await self._run(token, path)
            if result is not None and self._is_current(token):
                self._add_log("Translation completed successfully!")
                self._update(
                    status=PipelineStatus.DONE,
                    translated_content=result,
                    service_status=self._ready_or_offline(),
                )
        except Exception as e:
            if self._is_current(token):
                self._fail(e)
            else:
                logger.debug("Ignoring failure from abandoned run: %s", e)
        finally:
            if self._is_current(token):
                self._stop_ticker()

        return self._state

    # Run steps

    async def _run(self, token: int, path: Path) -> str | None:
        """Produce the final SRT text, or None if the run was abandoned."""
        content = await asyncio.to_thread(read_srt_text, path)
        if not self._is_current(token):
            return None
        self._add_log("File read.")

        subtitles = parse_srt(content)
        self._update(original_subtitles=tuple(subtitles))
        self._add_log(f"File parsed successfully. {len(subtitles)} subtitle lines found.")
        if not subtitles:
            raise EmptyOrInvalidDocument(MSG_EMPTY_DOCUMENT)

        self._update(status=PipelineStatus.TRANSLATING)
        self._start_ticker(token)

        try:
            translations = await self.service.translate(
                subtitles,
                api_key=self.config.api_key,
                model=self.config.model,
                add_log=self._log_sink(token),
                on_progress=self._progress_sink(token),
            )
        except SubtitleTranslationError:
            raise
        except Exception as e:
            raise TranslationFailed(str(e)) from e

        if not self._is_current(token):
            return None
        self._stop_ticker()

        merged = merge_translations(subtitles, translations)
        self._add_log("Adding header/footer and building the final file...")
        processed = apply_header_footer(merged, self.config.header_footer())
        if self.config.renumber:
            processed = renumber(processed)
        return subtitles_to_srt(processed)

    def _fail(self, error: Exception) -> None:
        if isinstance(error, SubtitleTranslationError):
            kind = type(error).__name__
            logger.error("Translation run failed: %s", error)
        else:
            kind = UnknownFailure.__name__
            logger.exception("Translation run failed unexpectedly")

        message = str(error) or MSG_UNKNOWN
        self._add_log(f"Error: {message}", logging.ERROR)
        self._update(
            status=PipelineStatus.ERROR,
            error_message=f"Translation failed: {message}",
            error_kind=kind,
            translated_content=None,
            service_status=ServiceStatus.ERROR,
        )

    def _log_sink(self, token: int) -> LogCallback:
        def add_log(message: str) -> None:
            if self._is_current(token):
                self._add_log(message)

        return add_log

    def _progress_sink(self, token: int) -> ProgressCallback:
        def on_progress(batch: dict[int, str]) -> None:
            if not self._is_current(token) or self._state.status is not PipelineStatus.TRANSLATING:
                logger.debug("Dropping progress batch from an inactive run")
                return
            self._update(live_translations=merge_progress(self._state.live_translations, batch))

        return on_progress

    # Elapsed time

    def _start_ticker(self, token: int) -> None:
        self._stop_ticker()
        self._ticker = asyncio.get_running_loop().create_task(self._tick(token))

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    async def _tick(self, token: int) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            if not self._is_current(token) or self._state.status is not PipelineStatus.TRANSLATING:
                return
            self._update(elapsed_seconds=self._state.elapsed_seconds + 1)
