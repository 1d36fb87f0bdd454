class VocabularyError(Exception):
    """Base class for errors raised by vocabuilder."""


class EmptyWordListError(VocabularyError):
    """An uploaded word list contained no usable entries."""


class NoWordsAvailableError(VocabularyError):
    """A session was requested but the word pool is empty."""


class SessionError(VocabularyError):
    """A quiz session could not carry out the requested step."""


class SessionNotFoundError(SessionError):
    """No live session exists for the given id, or it has expired."""


class SessionCompleteError(SessionError):
    """The session has no cards left to draw."""


class NoCardPresentedError(SessionError):
    """An answer arrived while no card was on screen."""


class InvalidOptionError(VocabularyError):
    """The submitted answer is not one of the card's options."""
