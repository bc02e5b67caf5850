class MagicMenuError(Exception):
    pass


class BlockBuildError(MagicMenuError):
    """A menu node could not be built from the given input."""
