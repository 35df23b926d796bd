"""
Mock speech sink that prints announcements instead of speaking them.
"""
from typing import Callable, List, Optional, Tuple

from .types import AnnounceRequest, SpeechDone

DoneCallback = Callable[[SpeechDone], None]


class MockSpeaker:
    """Mock speaker that records and prints announcements."""
    
    def __init__(self, auto_complete: bool = True):
        """
        Initialize the mock speaker.
        
        Args:
            auto_complete: Signal completion immediately instead of waiting for finish()
        """
        self.auto_complete = auto_complete
        self.spoken: List[AnnounceRequest] = []
        self._current: Optional[Tuple[AnnounceRequest, DoneCallback]] = None
        self._queued: Optional[Tuple[AnnounceRequest, DoneCallback]] = None
    
    @property
    def is_speaking(self) -> bool:
        return self._current is not None
    
    def announce(self, request: AnnounceRequest, on_done: DoneCallback) -> None:
        """Print the announcement, or queue it behind the one in flight."""
        if self._current is not None:
            replaced, self._queued = self._queued, (request, on_done)
            if replaced is not None:
                replaced[1](SpeechDone(generation=replaced[0].generation))
            return
        self._start(request, on_done)
    
    def finish(self) -> bool:
        """Complete the in-flight utterance; returns False if nothing was speaking."""
        if self._current is None:
            return False
        (request, on_done), self._current = self._current, None
        queued, self._queued = self._queued, None
        on_done(SpeechDone(generation=request.generation))
        if queued is not None:
            self._start(*queued)
        return True
    
    def _start(self, request: AnnounceRequest, on_done: DoneCallback) -> None:
        self.spoken.append(request)
        print(f"[MockSpeaker] {request.text} (generation {request.generation}, call #{len(self.spoken)})")
        if self.auto_complete:
            on_done(SpeechDone(generation=request.generation))
        else:
            self._current = (request, on_done)
    
    @property
    def texts(self) -> List[str]:
        return [r.text for r in self.spoken]
    
    def reset(self) -> None:
        """Reset recorded announcements for testing."""
        self.spoken = []
        self._current = None
        self._queued = None
