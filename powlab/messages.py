"""Messages the miner hands over to the presentation layer"""
import stringcase


class Message:
    """Generic message that accepts visitors and dispatches their processing."""

    class VisitorMethodNotImplemented(Exception):
        """Custom handling to report if visitor method is missing"""

        def __init__(self, method_name):
            self.method_name = method_name

        def __str__(self):
            return self.method_name

    def accept(self, visitor):
        """Call visitor method based on the actual message type."""
        method_name = "visit_{}".format(stringcase.snakecase(type(self).__name__))

        try:
            visit_method = getattr(visitor, method_name)
        except AttributeError:
            raise self.VisitorMethodNotImplemented(method_name)

        return visit_method(self)

    def _format(self, content):
        return "{}({})".format(type(self).__name__, content)


class AttemptResult(Message):
    """Outcome of hashing a single header"""

    def __init__(
        self,
        header: str,
        hash: str,
        nonce: int,
        success: bool,
        attempt_count: int,
        best_hash: str,
        progress: float,
    ):
        self.header = header
        self.hash = hash
        self.nonce = nonce
        self.success = success
        self.attempt_count = attempt_count
        self.best_hash = best_hash
        self.progress = progress

    def __str__(self):
        return self._format(
            "nonce={}, hash={}, success={}, attempts={}".format(
                self.nonce, self.hash, self.success, self.attempt_count
            )
        )


class BlockFound(Message):
    def __init__(self, nonce: int, hash: str, difficulty: int, attempt_count: int):
        self.nonce = nonce
        self.hash = hash
        self.difficulty = difficulty
        self.attempt_count = attempt_count

    def share_text(self):
        """Summary meant to be pasted anywhere"""
        return (
            "I mined a block!\n"
            "Difficulty: {}\n"
            "Nonce: {}\n"
            "Hash: {}\n"
            "Tries: {:,}\n"
            "#Bitcoin #ProofOfWork".format(
                self.difficulty, self.nonce, self.hash, self.attempt_count
            )
        )

    def __str__(self):
        return self._format(
            "nonce={}, hash={}, difficulty={}".format(
                self.nonce, self.hash, self.difficulty
            )
        )


class HashrateReport(Message):
    def __init__(self, rate: int, average: float = None):
        """
        :param rate: attempts counted in the window that just closed
        :param average: mean of the recent windows, None before the first one
        """
        self.rate = rate
        self.average = average

    def __str__(self):
        return self._format("{:,} H/s".format(self.rate))


class MinerReset(Message):
    def __str__(self):
        return self._format("")
