"""Testing fakes – in-memory doubles for kernel ports."""
from mp_access.testing.fakes.subject import RecordingSubject

__all__ = ["RecordingSubject"]
