from eh_runner.events import ProgressEmitter, RunEvent


class RecordingEmitter(ProgressEmitter):
    """Keep every emitted event in memory."""

    def __init__(self) -> None:
        self.events: list[RunEvent] = []

    def emit(self, event: RunEvent) -> None:
        self.events.append(event)
