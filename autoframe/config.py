from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from autoframe.schemas import OutputWindow, SessionConfig
from autoframe.time_mapper import TimeMapper
from autoframe.view_mapper import ViewMapper


@dataclass(frozen=True)
class AppConfig:
    session: SessionConfig
    verbose: bool = False

    @property
    def windows(self) -> Tuple[OutputWindow, ...]:
        return tuple(self.session.output_windows or ())

    @property
    def view_mapper(self) -> ViewMapper:
        return ViewMapper(self.session.input_size, self.session.output_size, self.session.zoom.padding)

    @property
    def time_mapper(self) -> TimeMapper:
        return TimeMapper(self.session.timeline_offset_ms, self.windows)

    @property
    def output_duration_ms(self) -> int:
        return self.time_mapper.get_output_duration()
