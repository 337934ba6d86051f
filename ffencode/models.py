from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional


@dataclass
class Job:
    uid: str
    workpath: str
    output: Optional[str] = None  # Current output artifact of the job


ProgressHook = Callable[[Job, int], None]
CompleteHook = Callable[[Job], None]


@dataclass
class EncodeOptions:
    """Options accepted by the encode action."""

    preset: Optional[str] = None
    input: Optional[str] = None
    output: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    on_progress: Optional[ProgressHook] = None
    on_complete: Optional[CompleteHook] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EncodeOptions":
        """Build options from a job description, accepting camelCase hook names."""
        on_progress = data.get("on_progress", data.get("onProgress"))
        on_complete = data.get("on_complete", data.get("onComplete"))
        return cls(
            preset=data.get("preset"),
            input=data.get("input"),
            output=data.get("output"),
            params=dict(data.get("params") or {}),
            on_progress=on_progress if callable(on_progress) else None,
            on_complete=on_complete if callable(on_complete) else None,
        )
