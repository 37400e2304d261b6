"""Rate-limit pacing between sequential API calls."""

import random
from dataclasses import dataclass

from . import config
from .cancellation import CancellationToken


@dataclass
class Pacer:
    """Fixed delay with optional random jitter, both in seconds."""

    delay: float = config.CHANNEL_DELAY_SECONDS
    jitter: float = 0.0

    def interval(self) -> float:
        if self.jitter <= 0:
            return self.delay
        return self.delay + random.uniform(0, self.jitter)

    def pause(self, cancel_token: CancellationToken) -> None:
        """Wait one interval; return early and raise if the run is cancelled."""
        seconds = self.interval()
        if seconds > 0:
            cancel_token.wait(seconds)
        cancel_token.raise_if_cancelled()
