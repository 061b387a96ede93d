"""Testing support – fakes and fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["mp_access.testing.fixtures"]
"""

from mp_access.testing.fakes import RecordingSubject

__all__ = ["RecordingSubject"]
