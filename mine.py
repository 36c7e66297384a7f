import argparse
import asyncio
import logging

from colorama import Fore, Style, init
from event_bus import EventBus

import powlab.mining_params as mining_params
from powlab.messages import Message
from powlab.miner import Miner
from powlab.session import MiningJob

init()


class ConsoleView:
    """Renders miner messages on the terminal"""

    def __init__(self, miner: Miner, verbose: bool = False):
        self.miner = miner
        self.verbose = verbose

    def visit_attempt_result(self, msg):
        if self.verbose or msg.success:
            print(
                f"{Fore.YELLOW}nonce {Style.BRIGHT}%d{Style.NORMAL} -> %s{Style.RESET_ALL}"
                % (msg.nonce, msg.hash)
            )
        if not msg.success and not self.miner.is_mining:
            print("Nope. Try again or auto-mine.")

    def visit_block_found(self, msg):
        print(f"{Style.BRIGHT}{Fore.GREEN}%s{Style.RESET_ALL}" % msg.share_text())

    def visit_hashrate_report(self, msg):
        stats = self.miner.session.snapshot()
        print(
            f"{Fore.CYAN}%s H/s | tries %s | best %s | progress %.2f%%{Style.RESET_ALL}"
            % (
                "{:,}".format(msg.rate),
                "{:,}".format(stats["attempt_count"]),
                stats["best_hash"] or "-",
                self.miner.progress() * 100,
            )
        )

    def visit_miner_reset(self, msg):
        print("Reset. Ready.")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="mine.py",
        description="Searches for a nonce whose double SHA-256 header hash meets the target",
    )
    parser.add_argument("--prev-hash", default="genesis", help="previous block hash")
    parser.add_argument("--data", default="hello", help="block data")
    parser.add_argument("--nonce", default=0, help="starting nonce, default = 0")
    parser.add_argument(
        "--difficulty",
        default=mining_params.DEFAULT_DIFFICULTY,
        help="leading zero hex digits required, clamped to [{}, {}]".format(
            mining_params.MIN_DIFFICULTY, mining_params.MAX_DIFFICULTY
        ),
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=mining_params.BATCH_SIZE,
        help="attempts per scheduling slice, default = {}".format(
            mining_params.BATCH_SIZE
        ),
    )
    parser.add_argument(
        "--once",
        help="hash a single nonce instead of auto mining",
        action="store_true",
    )
    parser.add_argument(
        "--verbose",
        help="display every attempt (warning: a lot of text is generated)",
        action="store_const",
        const=True,
    )
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    job = MiningJob.from_input(args.prev_hash, args.data, args.difficulty)
    bus = EventBus()
    m1 = Miner("miner1", bus, job=job, batch_size=args.batch_size)
    m1.set_nonce(args.nonce)
    view = ConsoleView(m1, verbose=bool(args.verbose))

    @bus.on("miner1")
    def subscribe_m1(session_uid, message: Message):
        message.accept(view)

    print("Target: {}".format(job.target.pattern()))
    print("Header: {}".format(m1.header_preview()))

    if args.once:
        return m1.attempt_once()

    try:
        return await m1.start()
    except asyncio.CancelledError:
        m1.stop()
        return None


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nMining interrupted by user.")
