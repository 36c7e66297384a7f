import asyncio
import enum
import logging

from colorama import Fore, Style
from event_bus import EventBus

import powlab.mining_params as mining_params
from powlab.hasher import double_hash
from powlab.messages import AttemptResult, BlockFound, HashrateReport, MinerReset
from powlab.session import CancelToken, MiningJob, MiningState, coerce_nonce

logger = logging.getLogger(__name__)


def attempt(state: MiningState, job: MiningJob, hasher=double_hash) -> AttemptResult:
    """Hashes the header for the current nonce and accounts the result.

    Statistics are touched only after the hash is computed, a failing hasher
    leaves the state as it was. The nonce is not advanced here.
    """
    header = job.header(state.nonce)
    hash = hasher(header)
    state.account_attempt(hash)

    return AttemptResult(
        header=header,
        hash=hash,
        nonce=state.nonce,
        success=job.target.meets(hash),
        attempt_count=state.attempt_count,
        best_hash=state.best_hash,
        progress=job.target.progress(state.attempt_count),
    )


class Miner:
    class States(enum.Enum):
        IDLE = 0
        RUNNING = 1
        FOUND = 2

    def __init__(
        self,
        name: str,
        bus: EventBus = None,
        job: MiningJob = None,
        session: MiningState = None,
        batch_size: int = mining_params.BATCH_SIZE,
        hasher=double_hash,
    ):
        self.name = name
        self.bus = bus if bus is not None else EventBus()
        self.job = job if job is not None else MiningJob("", "")
        self.session = session if session is not None else MiningState()
        self.batch_size = max(1, int(batch_size))
        self.hasher = hasher

        self.state = self.States.IDLE
        self.mine_proc = None
        self.cancel_token = None

    @property
    def is_mining(self):
        return self.state == self.States.RUNNING

    def set_job(self, job: MiningJob):
        """Swap the inputs, takes effect with the next attempt"""
        self.job = job

    def set_nonce(self, value):
        self.session.nonce = coerce_nonce(value)

    def header_preview(self):
        return self.job.header(self.session.nonce)

    def progress(self):
        return self.job.target.progress(self.session.attempt_count)

    def get_speed(self):
        return self.session.meter.get_speed()

    def _step(self, advance_on_success: bool) -> AttemptResult:
        result = attempt(self.session, self.job, self.hasher)
        if not result.success or advance_on_success:
            self.session.nonce += 1
        if result.success:
            self.__mark_found()

        self.__emit_msg_on_bus(result)
        rate = self.session.meter.sample()
        if rate is not None:
            self.__emit_msg_on_bus(
                HashrateReport(rate, self.session.meter.get_average_speed())
            )
        if result.success:
            self.__emit_aux_msg(
                "Success! Valid block found at nonce={}. Hash starts with {}.".format(
                    result.nonce, self.job.target.prefix()
                )
            )
            self.__emit_msg_on_bus(
                BlockFound(
                    nonce=result.nonce,
                    hash=result.hash,
                    difficulty=self.job.target.difficulty,
                    attempt_count=result.attempt_count,
                )
            )
        return result

    def attempt_once(self) -> AttemptResult:
        """Single manual attempt, the nonce always advances afterwards"""
        result = self._step(advance_on_success=True)
        if not result.success and self.state != self.States.RUNNING:
            self.state = self.States.IDLE
        return result

    def _begin_run(self) -> CancelToken:
        if self.state == self.States.RUNNING:
            raise RuntimeError("{} is already mining".format(self.name))
        token = CancelToken()
        self.cancel_token = token
        self.state = self.States.RUNNING
        self.session.is_running = True
        self.__emit_aux_msg("Auto mining {}".format(self.job))
        return token

    async def _run(self, token: CancelToken):
        try:
            while not token.is_cancelled:
                for _ in range(self.batch_size):
                    if token.is_cancelled:
                        break
                    result = self._step(advance_on_success=False)
                    if result.success:
                        return result
                # let the event loop serve everything else before the next batch
                await asyncio.sleep(0)
            return None
        except Exception:
            logger.exception("%s: mining stopped on error", self.name)
            raise
        finally:
            if self.cancel_token is token:
                self.cancel_token = None
                self.session.is_running = False
                if self.state == self.States.RUNNING:
                    self.state = self.States.IDLE

    async def mine(self):
        """Runs until a valid block is found or the run is cancelled

        :return: the winning AttemptResult, None when cancelled
        """
        token = self._begin_run()
        return await self._run(token)

    def start(self):
        """Schedules mining as a task on the running event loop"""
        token = self._begin_run()
        loop = asyncio.get_running_loop()
        self.mine_proc = loop.create_task(self._run(token))
        return self.mine_proc

    def stop(self):
        if self.cancel_token is not None:
            self.cancel_token.cancel()
            self.cancel_token = None
            self.__emit_aux_msg("Stopped.")
        self.session.is_running = False
        if self.state == self.States.RUNNING:
            self.state = self.States.IDLE

    def toggle(self):
        if self.is_mining:
            self.stop()
            return None
        return self.start()

    def reset(self):
        self.stop()
        self.session.reset()
        self.state = self.States.IDLE
        self.__emit_msg_on_bus(MinerReset())

    def __mark_found(self):
        # runs before subscribers hear about the block
        if self.cancel_token is not None:
            self.cancel_token.cancel()
            self.cancel_token = None
        self.session.is_running = False
        self.state = self.States.FOUND

    def __emit_msg_on_bus(self, msg):
        logger.debug("%s: %s", self.name, msg)
        self.bus.emit(self.name, self.session.uid, msg)

    def __emit_aux_msg(self, msg: str):
        logger.info(
            f"{Fore.BLUE}{Style.BRIGHT}%s: {Style.NORMAL}%s{Style.RESET_ALL}",
            self.name,
            msg,
        )
