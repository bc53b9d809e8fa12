"""Data models for subtranslate."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubtitleBlock(BaseModel):
    """A single subtitle cue: index, timestamp range and text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(gt=0)
    timestamp: str  # "HH:MM:SS,mmm --> HH:MM:SS,mmm"
    text: str

    @property
    def start(self) -> str:
        """Start half of the timestamp range."""
        return self.timestamp.split("-->", 1)[0].strip()

    @property
    def end(self) -> str:
        """End half of the timestamp range."""
        return self.timestamp.split("-->", 1)[-1].strip()

    def to_srt_block(self) -> str:
        """Convert to SRT format block."""
        return f"{self.index}\n{self.timestamp}\n{self.text}\n"


class PipelineStatus(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    TRANSLATING = "translating"
    DONE = "done"
    ERROR = "error"


class ServiceStatus(str, Enum):
    READY = "ready"
    ACTIVE = "active"
    ERROR = "error"


class PipelineSnapshot(BaseModel):
    """Read-only view of the orchestrator state handed to observers."""

    model_config = ConfigDict(frozen=True)

    status: PipelineStatus = PipelineStatus.IDLE
    service_status: ServiceStatus = ServiceStatus.READY
    online: bool = True
    file_name: str = ""
    error_message: str = ""
    error_kind: str = ""  # exception class name of the last failure
    logs: tuple[str, ...] = ()
    elapsed_seconds: int = 0
    original_subtitles: tuple[SubtitleBlock, ...] = ()
    live_translations: dict[int, str] = Field(default_factory=dict)
    translated_content: str | None = None

    @property
    def translated_count(self) -> int:
        """Number of original cues that already have a live translation."""
        return sum(1 for block in self.original_subtitles if block.index in self.live_translations)
