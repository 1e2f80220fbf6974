"""
Exceptions raised by the Bencode codec

Both errors derive from ValueError so that code written against the older
bdecode()/bencode() contract, which only promised ValueError, keeps working.
"""


class DecodeError(ValueError):
    """The input is not a valid bencoded value

    'offset' is the position (from the start of the input) of the byte at which
    the problem was detected"""
    def __init__(self, reason: str, offset: int):
        super().__init__(reason, offset)
        self.reason = reason
        self.offset = offset

    def __str__(self) -> str:
        return "{} at byte {}".format(self.reason, self.offset)


class EncodeError(ValueError):
    """The object (or one of the objects it contains) has no Bencode representation"""
    def __init__(self, reason: str, type_name: str):
        super().__init__(reason, type_name)
        self.reason = reason
        self.type_name = type_name

    def __str__(self) -> str:
        return self.reason
