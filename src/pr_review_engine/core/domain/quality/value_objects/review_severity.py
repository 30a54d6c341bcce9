from enum import StrEnum


class ReviewSeverity(StrEnum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    NIT = "nit"
    FYI = "fyi"
    PRAISE = "praise"

    @classmethod
    def parse(cls, label: str | None) -> "ReviewSeverity | None":
        """Tolerant lookup for model-emitted labels ("Required", " nit ")."""
        if not label:
            return None
        try:
            return cls(label.strip().lower())
        except ValueError:
            return None
