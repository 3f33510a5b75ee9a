"""Error taxonomy with HTTP classification."""


class ForgeError(Exception):
    """Base error. Carries the status code the boundary should answer with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind}


# ============================================================================
# Client errors
# ============================================================================


class ValidationError(ForgeError):
    """Request validation failed."""

    status_code = 400


class InvalidBundleNameError(ValidationError):
    """Bundle name violates the naming constraint."""


class MalformedMarkupError(ForgeError):
    """Markup could not be normalized."""

    status_code = 422


class InlineHandlerError(MalformedMarkupError):
    """A quoted inline event handler survived normalization."""

    def __init__(
        self,
        message: str = "Inline event handlers must use LWC syntax, e.g. onclick={handleClick}.",
    ) -> None:
        super().__init__(message)


class DuplicateAttributeError(MalformedMarkupError):
    """A start tag repeats an attribute."""

    def __init__(self, attribute: str) -> None:
        super().__init__(f'Duplicate attribute "{attribute}" detected in HTML.')
        self.attribute = attribute


class MissingTemplateError(MalformedMarkupError):
    """Markup has no root template region."""

    def __init__(self, message: str = "HTML must contain <template>...</template>") -> None:
        super().__init__(message)


class MissingClassDeclarationError(ForgeError):
    """Behavior code lacks the fixed component class header."""

    status_code = 422

    def __init__(
        self, message: str = "JS must export class Preview extends LightningElement"
    ) -> None:
        super().__init__(message)


class BundleNotFoundError(ForgeError):
    """No generated bundle is available in the store."""

    status_code = 404


# ============================================================================
# Server errors
# ============================================================================


class ArtifactStoreError(ForgeError):
    """Reading or writing the bundle location failed."""

    status_code = 500


class GenerationServiceError(ForgeError):
    """The model call failed or returned unusable content."""

    status_code = 502


class DeploySubmissionError(ForgeError):
    """Submitting the archive to the remote service failed."""

    status_code = 502


class DeployAuthError(DeploySubmissionError):
    """Login to the remote service failed."""


class DeployTimeoutError(ForgeError):
    """The deploy job did not finish before the deadline."""

    status_code = 504

    def __init__(
        self, message: str = "Deployment timed out while waiting for Salesforce to finish."
    ) -> None:
        super().__init__(message)


class DeployJobFailure(ForgeError):
    """The deploy job finished but reported failure."""

    status_code = 502
