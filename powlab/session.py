"""Mining session primitives: job inputs, mutable statistics and cancellation"""
import math
import random

from hashids import Hashids

import powlab.mining_params as mining_params
from powlab.hashrate_meter import HashrateMeter
from powlab.target import Target


def gen_uid():
    hashids = Hashids()
    return hashids.encode(random.randint(0, 16777216))


def coerce_nonce(value) -> int:
    """Nonce typed by the user, floored and kept non-negative; garbage becomes 0"""
    if isinstance(value, int) and not isinstance(value, bool):
        return max(0, value)
    try:
        return max(0, int(str(value).strip()))
    except ValueError:
        pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return max(0, math.floor(number))


def join_header(prev_hash: str, data: str, nonce: int) -> str:
    return mining_params.HEADER_SEPARATOR.join((prev_hash, data, str(nonce)))


class MiningJob:
    """Inputs of the block being mined, the nonce lives in MiningState"""

    def __init__(self, prev_hash: str, data: str, target: Target = None):
        """
        :param prev_hash: hash of the previous block, surrounding whitespace is dropped
        :param data: block payload, surrounding whitespace is dropped
        :param target: difficulty target, defaults to the lowest difficulty
        """
        self.prev_hash = (prev_hash or "").strip()
        self.data = (data or "").strip()
        self.target = target if target is not None else Target()

    @classmethod
    def from_input(cls, prev_hash, data, difficulty):
        return cls(prev_hash, data, Target(difficulty))

    def header(self, nonce: int) -> str:
        return join_header(self.prev_hash, self.data, nonce)

    def _format(self, content):
        return "{}({})".format(type(self).__name__, content)

    def __str__(self):
        return self._format(
            "prev_hash={}, data={}, target={}".format(
                self.prev_hash,
                self.data,
                self.target,
            )
        )


class CancelToken:
    """Cooperative cancellation flag handed to a single mining run"""

    def __init__(self):
        self.is_cancelled = False

    def cancel(self):
        self.is_cancelled = True


class MiningState:
    """Statistics of one mining session.

    nonce and attempt_count are independent: the user may edit the nonce between
    attempts while attempt_count only ever grows until reset()
    """

    def __init__(self, meter: HashrateMeter = None):
        self.uid = gen_uid()
        self.meter = meter if meter is not None else HashrateMeter()
        self.nonce = 0
        self.attempt_count = 0
        self.best_hash = None
        self.is_running = False

    @property
    def attempts_in_current_window(self):
        return self.meter.attempts_in_current_window

    def account_attempt(self, hash: str):
        """Records a successfully computed hash"""
        self.attempt_count += 1
        self.meter.measure()
        # all hashes share the length, so string order matches numeric order
        if self.best_hash is None or hash < self.best_hash:
            self.best_hash = hash

    def reset(self):
        self.nonce = 0
        self.attempt_count = 0
        self.best_hash = None
        self.is_running = False
        self.meter.reset()

    def snapshot(self):
        return dict(
            nonce=self.nonce,
            attempt_count=self.attempt_count,
            best_hash=self.best_hash,
            attempts_in_current_window=self.attempts_in_current_window,
            is_running=self.is_running,
        )

    def __str__(self):
        return "{}(uid={}, nonce={}, attempts={}, best_hash={})".format(
            type(self).__name__,
            self.uid,
            self.nonce,
            self.attempt_count,
            self.best_hash,
        )
