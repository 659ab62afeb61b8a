class EstimateError(ValueError):
    """Base class for rejected estimate drafts and payloads."""


class DuplicateSectionError(EstimateError):
    """A section of this type already exists in the draft."""

    def __init__(self, section_type: str):
        self.section_type = section_type
        super().__init__(f"A {section_type} section already exists")


class PayloadError(EstimateError):
    """The draft cannot be turned into a save payload."""
