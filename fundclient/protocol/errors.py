# fundclient/protocol/errors.py

class ProtocolError(Exception):
    """Base for protocol-level failures (field codec / command semantics)."""

class EncodeError(ProtocolError):
    pass

class DecodeError(ProtocolError):
    pass

class EventIndexError(ProtocolError):
    """Index-bound request rejected locally; nothing was sent."""

    def __init__(self, cmd: str, index: int, count: int):
        if count <= 0:
            msg = f"{cmd} index {index} rejected: no events listed yet"
        else:
            msg = f"{cmd} index {index} outside [0, {count - 1}]"
        super().__init__(msg)
        self.cmd = cmd
        self.index = index
        self.count = count
