class PadDraggerError(ValueError):
    """Base class for input validation failures raised by the analysis core."""


class MalformedInputError(PadDraggerError):
    pass


class MalformedHexError(MalformedInputError):
    pass


class LengthMismatchError(PadDraggerError):
    pass


class InsufficientCiphertextsError(PadDraggerError):
    pass


class CribTooLongError(PadDraggerError):
    pass


class EmptyCribError(PadDraggerError):
    pass


class InvalidOffsetError(PadDraggerError):
    pass


class PluginLoadError(RuntimeError):
    pass


class PluginSignatureError(TypeError):
    pass
