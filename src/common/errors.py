"""Exception hierarchy for pinyarn."""


class PinyarnError(Exception):
    """Base class for errors that abort a pinyarn run."""
