class HuffmanError(Exception):
    """Base class for everything the compressor raises on purpose."""


class IoFailure(HuffmanError):
    pass


class MalformedHeader(HuffmanError):
    pass


class TruncatedPayload(HuffmanError):
    pass


class DecodingError(HuffmanError):
    pass


class UnknownSymbol(HuffmanError, KeyError):
    # KeyError so callers treating the tree like a mapping still catch it
    pass
