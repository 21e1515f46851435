"""Error taxonomy shared by the domain services, repositories and workflows.

Every error is raised at the earliest point where it can be detected and
propagates unchanged; the HTTP layer maps the five top-level kinds onto status
codes (see ``main.py``).
"""


class SkillMatchError(Exception):
    """Base class for every error raised by the skill matching core."""

    kind = "error"


# ---------------------------------------------------------------------------
# Validation: construction of profiles, dictionaries and bids
# ---------------------------------------------------------------------------


class ValidationError(SkillMatchError):
    """A value object failed its construction-time checks."""

    kind = "validation_error"


class MissingLayerError(ValidationError):
    def __init__(self, layer: str, field: str, reason: str = "missing"):
        self.layer = layer
        self.field = field
        if reason == "missing":
            message = f"Missing layer in {field}: {layer}"
        else:
            message = f"Invalid {field} type for layer {layer}: {reason}"
        super().__init__(message)


class LayerWeightsSumError(ValidationError):
    def __init__(self, actual_sum: float):
        self.actual_sum = actual_sum
        super().__init__(
            f"Layer weights must sum to 1.0 (±0.001). Current sum: {actual_sum:.6f}"
        )


class SkillWeightsSumError(ValidationError):
    def __init__(self, layer: str, actual_sum: float):
        self.layer = layer
        self.actual_sum = actual_sum
        super().__init__(
            f"Skill weights in layer '{layer}' must sum to 1.0 (±0.001). "
            f"Current sum: {actual_sum:.6f}"
        )


class WeightOutOfRangeError(ValidationError):
    def __init__(self, where: str, weight: object):
        self.where = where
        self.weight = weight
        super().__init__(f"Weight for {where} must be a number in [0, 1], got {weight!r}")


class InvalidSkillIdentifierError(ValidationError):
    def __init__(self, layer: str, message: str | None = None):
        self.layer = layer
        super().__init__(
            message or f"Invalid skill identifier in layer '{layer}': must be a non-empty string"
        )


class EmptySkillIdentifierError(InvalidSkillIdentifierError):
    def __init__(self, layer: str):
        super().__init__(layer, f"Empty skill identifier in layer '{layer}'")


class SkillIdentifierTooLongError(InvalidSkillIdentifierError):
    def __init__(self, layer: str, max_length: int = 100):
        super().__init__(
            layer, f"Skill identifier too long in layer '{layer}': max {max_length} characters"
        )


class InvalidVersionFormatError(ValidationError):
    def __init__(self, version: object):
        self.version = version
        super().__init__(
            f"Invalid dictionary version format: '{version}'. Expected format: YYYY.N (e.g., 2024.1)"
        )


class InvalidLayerError(ValidationError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid layer '{value}'. Expected one of: frontend, backend, database, cloud, devops, others"
        )


class InvalidRoleError(ValidationError):
    pass


class InvalidBidError(ValidationError):
    pass


# ---------------------------------------------------------------------------
# Input: rejected caller input, raised before any state mutation
# ---------------------------------------------------------------------------


class InputError(SkillMatchError):
    kind = "input_error"


class EmptyNameError(InputError):
    def __init__(self, what: str = "Skill name"):
        super().__init__(f"{what} cannot be empty")


class NameTooLongError(InputError):
    def __init__(self, name: str, max_length: int = 100):
        self.name = name
        super().__init__(f"Skill name too long: '{name}' (max {max_length} characters)")


class EmptyCanonicalNameError(InputError):
    def __init__(self):
        super().__init__("Canonical name cannot be empty")


class EmptyReasonError(InputError):
    def __init__(self):
        super().__init__("Rejection reason cannot be empty")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class NotFoundError(SkillMatchError):
    kind = "not_found"


class SkillNotFoundError(NotFoundError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Canonical skill '{name}' does not exist")


class CanonicalNotFoundError(NotFoundError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Canonical skill '{name}' not found in dictionary")


class QueueItemNotFoundError(NotFoundError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown skill '{name}' not found in queue")


class ProfileNotFoundError(NotFoundError):
    """A JD profile lookup failed. ``which`` names the role it played (current, past, ...)."""

    def __init__(self, profile_id: str, which: str | None = None):
        self.profile_id = profile_id
        self.which = which
        label = f"{which.capitalize()} JD" if which else "JD"
        super().__init__(f"{label} specification not found: {profile_id}")


class BidNotFoundError(NotFoundError):
    def __init__(self, bid_id: str):
        self.bid_id = bid_id
        super().__init__(f"Bid not found: {bid_id}")


class ResumeNotFoundError(NotFoundError):
    def __init__(self, resume_id: str):
        self.resume_id = resume_id
        super().__init__(f"Resume not found: {resume_id}")


class DictionaryVersionNotFoundError(NotFoundError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Dictionary version '{version}' not found")


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


class DuplicateError(SkillMatchError):
    kind = "duplicate"


class DuplicateSkillError(DuplicateError):
    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        super().__init__(detail or f"Skill '{name}' already exists in the dictionary")


class InvalidStateTransitionError(SkillMatchError):
    kind = "invalid_state_transition"


class AlreadyProcessedError(InvalidStateTransitionError):
    def __init__(self, name: str, status: str):
        self.name = name
        self.status = status
        super().__init__(f"Skill '{name}' has already been {status}")


class ConcurrentModificationError(SkillMatchError):
    """A compare-and-swap save found a newer stored revision than the one loaded."""

    kind = "concurrent_modification"

    def __init__(self, aggregate: str, expected: object, actual: object):
        self.aggregate = aggregate
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{aggregate} was modified concurrently: expected {expected}, found {actual}"
        )
