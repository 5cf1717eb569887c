class ClockLenseError(Exception):
    """Base class for errors raised while building a corpus."""


class SkipGame(ClockLenseError):
    """The payload is not eligible for timing analysis and is left out of the corpus."""

    def __init__(self, reason: str, detail: object = None):
        super().__init__(reason if detail is None else f"{reason}: {detail!r}")
        self.reason = reason
        self.detail = detail


class MalformedTimeControl(SkipGame):
    def __init__(self, time_control: str | None):
        super().__init__("malformed time control", time_control)
        self.time_control = time_control


class PlayerNotInGame(ClockLenseError):
    """Neither side of the game belongs to the player the archive was fetched for."""

    def __init__(self, username: str, white: str | None, black: str | None):
        super().__init__(f"{username} is not playing game between {white} and {black}")
        self.username = username
        self.white = white
        self.black = black
