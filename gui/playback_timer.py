"""
Qt driver for toolpath playback.
Runs a SimulationController from a QTimer and publishes frames as signals.
"""
from PySide6.QtCore import QObject, QTimer, QElapsedTimer, Signal

from core.simulation_controller import SimulationController


class PlaybackTimer(QObject):
    """Ticks a SimulationController on the Qt event loop."""

    frameChanged = Signal(object)  # AnimationFrame
    finished = Signal()

    def __init__(self, controller: SimulationController, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.clock = QElapsedTimer()
        self.timer = QTimer(self)
        self.timer.setInterval(max(1, int(controller.frame_interval * 1000)))
        self.timer.timeout.connect(self.on_tick)

    def now(self) -> float:
        """Monotonic seconds since the clock was started."""
        return self.clock.elapsed() / 1000.0

    def play(self):
        if not self.clock.isValid():
            self.clock.start()
        self.controller.start(self.now())
        frame = self.controller.current_frame
        if frame is not None:
            self.frameChanged.emit(frame)
        if self.controller.is_playing():
            self.timer.start()
        else:
            self.finished.emit()

    def pause(self):
        self.controller.pause(self.now())
        self.timer.stop()

    def resume(self):
        self.controller.resume(self.now())
        if self.controller.is_playing():
            self.timer.start()

    def seek(self, index: int):
        self.controller.seek(index, self.now())
        frame = self.controller.current_frame
        if frame is not None:
            self.frameChanged.emit(frame)

    def stop(self):
        self.timer.stop()
        self.controller.stop()

    def on_tick(self):
        for frame in self.controller.tick(self.now()):
            self.frameChanged.emit(frame)
        if not self.controller.is_playing():
            self.timer.stop()
            self.finished.emit()
