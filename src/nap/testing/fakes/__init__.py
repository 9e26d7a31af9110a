"""Testing fakes – in-memory doubles for nap ports."""
from nap.testing.fakes.doer import RecordingCancellationToken, ScriptedDoer
from nap.testing.fakes.metrics import FakeMetricsRegistry, Sample

__all__ = ["FakeMetricsRegistry", "RecordingCancellationToken", "Sample", "ScriptedDoer"]
