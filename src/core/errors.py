class VaultValuationError(Exception):
    """
    Base class for failures of the vault valuation engine.
    """


class DecodeError(VaultValuationError):
    """
    Raised when raw account bytes do not match the vault layout.

    The account was read from the wrong address or has an incompatible
    version; retrying the decode will not help.
    """


class ClockSkewError(VaultValuationError, ArithmeticError):
    """
    Raised when the valuation timestamp precedes the vault's last report.
    """

    def __init__(self, now: int, last_report: int):
        self.now = now
        self.last_report = last_report
        super().__init__(
            f"Timestamp {now} is earlier than vault last report {last_report}"
        )


class ArithmeticOverflowError(VaultValuationError, ArithmeticError):
    """
    Raised when a checked arithmetic step leaves the representable range.
    """


class InvariantWarning(UserWarning):
    """
    Issued when ledger data is inconsistent but a result can still be computed.
    """
