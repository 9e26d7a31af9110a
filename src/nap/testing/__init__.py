"""Testing support – fakes for doers, tokens and metrics."""

from nap.testing.fakes import FakeMetricsRegistry, RecordingCancellationToken, ScriptedDoer

__all__ = ["FakeMetricsRegistry", "RecordingCancellationToken", "ScriptedDoer"]
