"""
this class estimates miner speed from the attempts made
implemented using a sampling window: attempts are counted until at least
RATE_WINDOW_MS milliseconds elapsed, then the count is reported as the rate
and the window starts over. Past samples are kept in a rolling buffer so an
average speed is available as well.
"""
import time

import numpy as np

import powlab.mining_params as mining_params


class HashrateMeter(object):
    def __init__(
        self,
        window_ms: int = mining_params.RATE_WINDOW_MS,
        history_size: int = mining_params.RATE_HISTORY_SIZE,
        clock=None,
    ):
        self.window_ms = window_ms
        self.history_size = history_size
        # clock returns seconds, tests inject a fake one
        self.clock = clock or time.monotonic
        self.rate_buffer = np.zeros(self.history_size)
        self.samples = 0
        self.attempts_in_current_window = 0
        self.last_sample_at = self.get_time()
        self.last_rate = 0

    def get_time(self):
        """Current time in milliseconds"""
        return self.clock() * 1000.0

    def reset(self, time_started=None):
        self.rate_buffer = np.zeros(self.history_size)
        self.samples = 0
        self.attempts_in_current_window = 0
        self.last_rate = 0
        self.last_sample_at = self.get_time() if time_started is None else time_started

    def measure(self, attempts: int = 1):
        """Account for finished attempts"""
        self.attempts_in_current_window += attempts

    def sample(self):
        """Closes the window once it is long enough

        :return: attempts counted in the closed window, or None while the window is
        still open
        """
        now = self.get_time()
        if now - self.last_sample_at < self.window_ms:
            return None

        rate = self.attempts_in_current_window
        self.rate_buffer = np.roll(self.rate_buffer, 1)
        self.rate_buffer[0] = rate
        self.samples = min(self.samples + 1, self.history_size)
        self.last_rate = rate
        self.attempts_in_current_window = 0
        self.last_sample_at = now
        return rate

    def get_speed(self):
        """Rate reported by the latest closed window, in attempts per window"""
        return self.last_rate

    def get_average_speed(self):
        if self.samples == 0:
            return None
        return float(np.mean(self.rate_buffer[: self.samples]))
