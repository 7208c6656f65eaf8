"""Exception hierarchy shared by every layer."""


class CardwiseError(Exception):
    """Base class for all cardwise errors."""


class InvalidArgument(CardwiseError, ValueError):
    """An outcome or memory-state value could not be accepted."""


class CardNotFound(CardwiseError, LookupError):
    """No card with the requested id exists in the store."""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id!r}")
        self.card_id = card_id


class StoreError(CardwiseError):
    """The backing key-value store could not be read or written."""
