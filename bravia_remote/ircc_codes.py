"""Catalog of IRCC remote-button codes understood by Bravia televisions."""

from enum import StrEnum


class IRCCCode(StrEnum):
    """Opaque IRCC tokens, one per physical remote button."""

    POWER = "AAAAAQAAAAEAAAAVAw=="
    POWER_OFF = "AAAAAQAAAAEAAAAvAw=="
    WAKE_UP = "AAAAAQAAAAEAAAAuAw=="
    INPUT = "AAAAAQAAAAEAAAAlAw=="
    HDMI1 = "AAAAAgAAABoAAABaAw=="
    HDMI2 = "AAAAAgAAABoAAABbAw=="
    HDMI3 = "AAAAAgAAABoAAABcAw=="
    HDMI4 = "AAAAAgAAABoAAABdAw=="
    SYNC_MENU = "AAAAAgAAABoAAABYAw=="

    NUM1 = "AAAAAQAAAAEAAAAAAw=="
    NUM2 = "AAAAAQAAAAEAAAABAw=="
    NUM3 = "AAAAAQAAAAEAAAACAw=="
    NUM4 = "AAAAAQAAAAEAAAADAw=="
    NUM5 = "AAAAAQAAAAEAAAAEAw=="
    NUM6 = "AAAAAQAAAAEAAAAFAw=="
    NUM7 = "AAAAAQAAAAEAAAAGAw=="
    NUM8 = "AAAAAQAAAAEAAAAHAw=="
    NUM9 = "AAAAAQAAAAEAAAAIAw=="
    NUM0 = "AAAAAQAAAAEAAAAJAw=="
    DOT = "AAAAAgAAAJcAAAAdAw=="

    VOLUME_UP = "AAAAAQAAAAEAAAASAw=="
    VOLUME_DOWN = "AAAAAQAAAAEAAAATAw=="
    MUTE = "AAAAAQAAAAEAAAAUAw=="
    AUDIO = "AAAAAQAAAAEAAAAXAw=="
    CHANNEL_UP = "AAAAAQAAAAEAAAAQAw=="
    CHANNEL_DOWN = "AAAAAQAAAAEAAAARAw=="

    UP = "AAAAAQAAAAEAAAB0Aw=="
    DOWN = "AAAAAQAAAAEAAAB1Aw=="
    LEFT = "AAAAAQAAAAEAAAA0Aw=="
    RIGHT = "AAAAAQAAAAEAAAAzAw=="
    CONFIRM = "AAAAAQAAAAEAAABlAw=="
    BACK = "AAAAAgAAAJcAAAAjAw=="
    HOME = "AAAAAQAAAAEAAABgAw=="
    OPTIONS = "AAAAAgAAAJcAAAA2Aw=="
    DISPLAY = "AAAAAQAAAAEAAAA6Aw=="
    HELP = "AAAAAgAAAMQAAABNAw=="
    CC = "AAAAAgAAAJcAAAAoAw=="

    RED = "AAAAAgAAAJcAAAAlAw=="
    GREEN = "AAAAAgAAAJcAAAAmAw=="
    YELLOW = "AAAAAgAAAJcAAAAnAw=="
    BLUE = "AAAAAgAAAJcAAAAkAw=="

    PLAY = "AAAAAgAAAJcAAAAaAw=="
    PAUSE = "AAAAAgAAAJcAAAAZAw=="
    STOP = "AAAAAgAAAJcAAAAYAw=="
    PREV = "AAAAAgAAAJcAAAA8Aw=="
    NEXT = "AAAAAgAAAJcAAAA9Aw=="
    FLASH_PLUS = "AAAAAgAAAJcAAAB4Aw=="
    FLASH_MINUS = "AAAAAgAAAJcAAAB5Aw=="


def resolve_code(code: IRCCCode | str) -> IRCCCode:
    """Return the catalog entry for a code given by value or by name.

    Raises:
        ValueError: If ``code`` is neither a known token nor a known name.

    """
    if isinstance(code, IRCCCode):
        return code
    if not isinstance(code, str):
        error_msg = f"Unknown IRCC code: {code!r}"
        raise ValueError(error_msg)
    try:
        return IRCCCode(code)
    except ValueError:
        pass
    try:
        return IRCCCode[code.upper()]
    except KeyError as err:
        error_msg = f"Unknown IRCC code: {code}"
        raise ValueError(error_msg) from err
