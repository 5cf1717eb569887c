import re

from utils.errors import MalformedTimeControl

_TIME_CONTROL = re.compile(r"(\d+)(?:\+(\d+))?")


def parse_time_control(time_control: str | None) -> tuple[int, int]:
    """Split a chess.com time control like ``"180+2"`` into (starting seconds, increment seconds).

    The increment defaults to 0 when absent. Daily controls such as ``"1/86400"``
    do not match and raise ``MalformedTimeControl``.
    """
    m = _TIME_CONTROL.fullmatch(time_control) if time_control else None
    if m is None:
        raise MalformedTimeControl(time_control)
    base, increment = m.groups()
    return int(base), int(increment or 0)


def format_time_control(starting_time: int, increment: int) -> str:
    # "3 | 2" for 180+2, "1:30 | 0" for 90
    minutes, seconds = divmod(starting_time, 60)
    base = f"{minutes}:{seconds:02d}" if seconds else f"{minutes}"
    return f"{base} | {increment}"
